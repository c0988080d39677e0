"""
User administration endpoints for API v1.

Both routes are restricted to administrators.  Responses never contain
the password hash: the service converts stored users to ``UserRead``.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from church_portal_api.app.core.errors import NotFoundError, validation_message
from church_portal_api.app.core.security import Principal, require_admin
from church_portal_api.app.core.storage import Storage, get_storage
from church_portal_api.app.schemas.user import UserAdminUpdate, UserRead
from church_portal_api.app.services.user_service import UserService


router = APIRouter()


@router.get("", response_model=List[UserRead])
async def list_users(
    current_user: Principal = Depends(require_admin),
    storage: Storage = Depends(get_storage),
) -> List[UserRead]:
    return await UserService.list_users(storage)


@router.patch("/{user_id}", response_model=UserRead, openapi_extra=validation_message("Invalid user data"))
async def update_user(
    user_id: int,
    updates: UserAdminUpdate,
    current_user: Principal = Depends(require_admin),
    storage: Storage = Depends(get_storage),
) -> UserRead:
    """Update a user's profile or role.

    A ``password`` in the body is ignored; passwords cannot be changed
    through this endpoint.
    """
    try:
        return await UserService.update_user(storage, user_id, updates)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
