"""Auth routes - registration, login, and identity."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ferienhaus.api.auth import CurrentUser, get_current_user, issue_token
from ferienhaus.api.errors import to_http_exception
from ferienhaus.api.state import get_app_settings, get_directory
from ferienhaus.domain.errors import BookingError, InvalidCredentialsError
from ferienhaus.domain.users import UserDirectory
from ferienhaus.infra.settings import Settings
from ferienhaus.observability.logging import get_logger
from ferienhaus.observability.redaction import safe_log_context

router = APIRouter(prefix="/auth", tags=["auth"])

logger = get_logger(__name__)


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=8)


@router.post("/register", status_code=201)
def register(
    body: RegisterRequest,
    directory: UserDirectory = Depends(get_directory),
) -> dict:
    """Create a regular user account. Admins are provisioned by operations scripts."""
    try:
        user = directory.register(body.name, body.email, body.password)
    except BookingError as exc:
        logger.warning(
            "registration rejected",
            extra={
                "extra_fields": {
                    **safe_log_context(email=body.email),
                    "reason": type(exc).__name__,
                },
            },
        )
        raise to_http_exception(exc)

    logger.info("user registered", extra={"extra_fields": {"user_id": user.id}})
    return {"user": user.to_public_dict()}


@router.post("/login")
def login(
    body: LoginRequest,
    directory: UserDirectory = Depends(get_directory),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """Exchange e-mail and password for a bearer token."""
    try:
        user = directory.authenticate(body.email, body.password)
    except InvalidCredentialsError:
        logger.warning(
            "login failed",
            extra={"extra_fields": safe_log_context(email=body.email)},
        )
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return {
        "access_token": issue_token(user, settings),
        "token_type": "bearer",
        "expires_in": settings.jwt_ttl_seconds,
        "user": user.to_public_dict(),
    }


@router.get("/whoami")
def whoami(user: CurrentUser = Depends(get_current_user)) -> dict:
    return user.to_public_dict()
