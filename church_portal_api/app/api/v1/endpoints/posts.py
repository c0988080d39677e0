"""
Blog post endpoints for API v1.

Unpublished posts are still returned by the listing; filtering by
``isPublished`` is left to the client.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from church_portal_api.app.core.errors import ForbiddenError, NotFoundError, validation_message
from church_portal_api.app.core.security import Principal, get_current_principal
from church_portal_api.app.core.storage import Storage, get_storage
from church_portal_api.app.schemas.common import Message
from church_portal_api.app.schemas.post import Post, PostCreate, PostUpdate
from church_portal_api.app.services.post_service import PostService


router = APIRouter()


@router.get("", response_model=List[Post])
async def list_posts(storage: Storage = Depends(get_storage)) -> List[Post]:
    return await PostService.list_all(storage)


@router.get("/{post_id}", response_model=Post)
async def get_post(post_id: int, storage: Storage = Depends(get_storage)) -> Post:
    try:
        return await PostService.get(storage, post_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post(
    "",
    response_model=Post,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=validation_message("Invalid post data"),
)
async def create_post(
    post: PostCreate,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> Post:
    return await PostService.create(storage, post, current_user)


@router.patch("/{post_id}", response_model=Post, openapi_extra=validation_message("Invalid post data"))
async def update_post(
    post_id: int,
    updates: PostUpdate,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> Post:
    try:
        return await PostService.update(storage, post_id, updates, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e


@router.delete("/{post_id}", response_model=Message)
async def delete_post(
    post_id: int,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> Message:
    try:
        await PostService.delete(storage, post_id, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    return Message(message="Post deleted")
