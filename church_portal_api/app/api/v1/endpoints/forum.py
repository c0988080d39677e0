"""
Forum endpoints for API v1.

Topics follow the usual read/create/update/delete pattern.  Replies
have no global listing; they are read per topic through
``GET /forum/topics/{topicId}/replies``.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from church_portal_api.app.core.errors import ForbiddenError, NotFoundError, validation_message
from church_portal_api.app.core.security import Principal, get_current_principal
from church_portal_api.app.core.storage import Storage, get_storage
from church_portal_api.app.schemas.common import Message
from church_portal_api.app.schemas.forum import (
    ForumReply,
    ForumReplyCreate,
    ForumReplyUpdate,
    ForumTopic,
    ForumTopicCreate,
    ForumTopicUpdate,
)
from church_portal_api.app.services.forum_service import ForumReplyService, ForumTopicService


router = APIRouter()


# ---------------------------------------------------------------------------
# Topics
# ---------------------------------------------------------------------------

@router.get("/topics", response_model=List[ForumTopic])
async def list_topics(storage: Storage = Depends(get_storage)) -> List[ForumTopic]:
    return await ForumTopicService.list_all(storage)


@router.get("/topics/{topic_id}", response_model=ForumTopic)
async def get_topic(topic_id: int, storage: Storage = Depends(get_storage)) -> ForumTopic:
    try:
        return await ForumTopicService.get(storage, topic_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post(
    "/topics",
    response_model=ForumTopic,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=validation_message("Invalid forum topic data"),
)
async def create_topic(
    topic: ForumTopicCreate,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> ForumTopic:
    return await ForumTopicService.create(storage, topic, current_user)


@router.patch(
    "/topics/{topic_id}",
    response_model=ForumTopic,
    openapi_extra=validation_message("Invalid forum topic data"),
)
async def update_topic(
    topic_id: int,
    updates: ForumTopicUpdate,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> ForumTopic:
    try:
        return await ForumTopicService.update(storage, topic_id, updates, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e


@router.delete("/topics/{topic_id}", response_model=Message)
async def delete_topic(
    topic_id: int,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> Message:
    """Delete a topic.  Its replies are kept."""
    try:
        await ForumTopicService.delete(storage, topic_id, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    return Message(message="Forum topic deleted")


@router.get("/topics/{topic_id}/replies", response_model=List[ForumReply])
async def list_topic_replies(topic_id: int, storage: Storage = Depends(get_storage)) -> List[ForumReply]:
    """Replies of a topic, oldest first.  Unknown topics yield an empty list."""
    return await ForumReplyService.by_topic(storage, topic_id)


# ---------------------------------------------------------------------------
# Replies
# ---------------------------------------------------------------------------

@router.get("/replies/{reply_id}", response_model=ForumReply)
async def get_reply(reply_id: int, storage: Storage = Depends(get_storage)) -> ForumReply:
    try:
        return await ForumReplyService.get(storage, reply_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post(
    "/replies",
    response_model=ForumReply,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=validation_message("Invalid forum reply data"),
)
async def create_reply(
    reply: ForumReplyCreate,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> ForumReply:
    return await ForumReplyService.create(storage, reply, current_user)


@router.patch(
    "/replies/{reply_id}",
    response_model=ForumReply,
    openapi_extra=validation_message("Invalid forum reply data"),
)
async def update_reply(
    reply_id: int,
    updates: ForumReplyUpdate,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> ForumReply:
    try:
        return await ForumReplyService.update(storage, reply_id, updates, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e


@router.delete("/replies/{reply_id}", response_model=Message)
async def delete_reply(
    reply_id: int,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> Message:
    try:
        await ForumReplyService.delete(storage, reply_id, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    return Message(message="Forum reply deleted")
