"""User lookup for admins choosing whom to book for."""

from fastapi import APIRouter, Depends, Query

from ferienhaus.api.auth import CurrentUser
from ferienhaus.api.rbac import require_admin
from ferienhaus.api.state import get_directory
from ferienhaus.domain.users import UserDirectory

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
def list_users(
    q: str | None = Query(None, description="Filter by name or e-mail"),
    _admin: CurrentUser = Depends(require_admin),
    directory: UserDirectory = Depends(get_directory),
) -> dict:
    """List users. Requires admin role."""
    return {"users": [u.to_public_dict() for u in directory.search(q)]}
