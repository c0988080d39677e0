"""
Authentication endpoints for API v1.

``/register`` and ``/login`` hand out bearer tokens; ``/logout`` revokes
the token it was called with; ``/user`` returns the current account.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from church_portal_api.app.core.errors import validation_message
from church_portal_api.app.core.security import (
    Principal,
    create_access_token,
    get_current_principal,
    revoke_token,
)
from church_portal_api.app.core.storage import Storage, get_storage
from church_portal_api.app.schemas.common import Message
from church_portal_api.app.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserRead, to_read
from church_portal_api.app.services.user_service import UserService


router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=validation_message("Invalid registration data"),
)
async def register(data: RegisterRequest, storage: Storage = Depends(get_storage)) -> AuthResponse:
    """Create an account and log it in.

    The very first account becomes an administrator; all later ones are
    members.
    """
    try:
        user = await UserService.register(storage, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    token = create_access_token({"sub": str(user.id)})
    return AuthResponse(user=to_read(user), access_token=token)


@router.post("/login", response_model=AuthResponse, openapi_extra=validation_message("Invalid login data"))
async def login(data: LoginRequest, storage: Storage = Depends(get_storage)) -> AuthResponse:
    user = await UserService.authenticate(storage, data.username, data.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = create_access_token({"sub": str(user.id)})
    return AuthResponse(user=to_read(user), access_token=token)


@router.post("/logout", response_model=Message)
async def logout(request: Request, current_user: Principal = Depends(get_current_principal)) -> Message:
    """Revoke the token used for this request."""
    if current_user.token_id and current_user.token_expires_at is not None:
        revoke_token(request.app.state.revoked_tokens, current_user.token_id, current_user.token_expires_at)
    return Message(message="Logged out")


@router.get("/user", response_model=UserRead)
async def current_user_profile(
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> UserRead:
    return await UserService.get_user(storage, current_user.id)
