"""JWT authentication.

Provides:
- issue_token(): Signs an HS256 access token for a user
- verify_token(): Validates a token and returns its subject claim
- get_current_user(): FastAPI dependency for the authenticated user
"""

from __future__ import annotations

import time

import jwt
from fastapi import Depends, HTTPException, Request

from ferienhaus.domain.users import User, UserDirectory
from ferienhaus.infra.settings import Settings

from .state import get_app_settings, get_directory

CurrentUser = User

_ALGORITHM = "HS256"


def _require_secret(settings: Settings) -> str:
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET not configured")
    return settings.jwt_secret


def issue_token(user: User, settings: Settings) -> str:
    """Create a signed access token for user.

    Raises:
        RuntimeError: If JWT_SECRET is not configured.
    """
    now = int(time.time())
    payload = {
        "sub": user.id,
        "role": user.role,
        "iss": settings.jwt_issuer,
        "iat": now,
        "exp": now + settings.jwt_ttl_seconds,
    }
    return jwt.encode(payload, _require_secret(settings), algorithm=_ALGORITHM)


def verify_token(token: str, settings: Settings) -> str:
    """Verify JWT and return subject claim.

    Raises:
        HTTPException: 401 if token is invalid or expired.
    """
    if not settings.jwt_secret:
        raise HTTPException(status_code=401, detail="Auth not configured")

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[_ALGORITHM],
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "iss", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Invalid token")
    return sub


def _extract_bearer_token(request: Request) -> str:
    """Extract Bearer token from Authorization header.

    Raises:
        HTTPException: 401 if header missing or malformed.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header")

    return parts[1]


def get_current_user(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    directory: UserDirectory = Depends(get_directory),
) -> CurrentUser:
    """FastAPI dependency: get authenticated user.

    Raises:
        HTTPException: 401 if token invalid/missing, 403 if user not found.
    """
    token = _extract_bearer_token(request)
    sub = verify_token(token, settings)

    user = directory.get(sub)
    if user is None:
        raise HTTPException(status_code=403, detail="User not found")
    return user
