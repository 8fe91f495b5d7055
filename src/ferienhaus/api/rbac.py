"""Role checks. Two roles only: user < admin."""

from __future__ import annotations

from fastapi import Depends, HTTPException

from ferienhaus.api.auth import CurrentUser, get_current_user


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """FastAPI dependency: authenticated user with the admin role.

    Raises:
        HTTPException: 403 for non-admin users.
    """
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Insufficient role")
    return user
