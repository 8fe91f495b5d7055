"""ASGI entry point: ``uvicorn ferienhaus.api.app:app``."""

from .factory import create_app

app = create_app()
