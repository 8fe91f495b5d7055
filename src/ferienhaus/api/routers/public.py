"""Public-facing routes."""

from fastapi import APIRouter

from ferienhaus.api.routes import auth, bookings, users

router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


router.include_router(auth.router)
router.include_router(bookings.router)
router.include_router(users.router)
