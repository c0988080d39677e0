"""
Business logic for the discussion forum.

Topics and replies are both owned through ``author_id``.  Replies are
not listed globally; they are fetched per topic.  Deleting a topic
leaves its replies in place.
"""

from typing import List, Optional

from ..core.storage import Storage
from ..schemas.forum import (
    ForumReply,
    ForumReplyCreate,
    ForumReplyUpdate,
    ForumTopic,
    ForumTopicCreate,
    ForumTopicUpdate,
)
from .content_service import OwnedContentService


class ForumTopicService(OwnedContentService[ForumTopic]):
    label = "Forum topic"
    owner_field = "author_id"

    @classmethod
    def _get(cls, storage: Storage, record_id: int) -> Optional[ForumTopic]:
        return storage.get_forum_topic(record_id)

    @classmethod
    def _create(cls, storage: Storage, data: ForumTopicCreate) -> ForumTopic:
        return storage.create_forum_topic(data)

    @classmethod
    def _update(cls, storage: Storage, record_id: int, data: ForumTopicUpdate) -> Optional[ForumTopic]:
        return storage.update_forum_topic(record_id, data)

    @classmethod
    def _delete(cls, storage: Storage, record_id: int) -> bool:
        return storage.delete_forum_topic(record_id)

    @classmethod
    def _list(cls, storage: Storage) -> List[ForumTopic]:
        return storage.get_all_forum_topics()


class ForumReplyService(OwnedContentService[ForumReply]):
    label = "Forum reply"
    owner_field = "author_id"

    @classmethod
    def _get(cls, storage: Storage, record_id: int) -> Optional[ForumReply]:
        return storage.get_forum_reply(record_id)

    @classmethod
    def _create(cls, storage: Storage, data: ForumReplyCreate) -> ForumReply:
        return storage.create_forum_reply(data)

    @classmethod
    def _update(cls, storage: Storage, record_id: int, data: ForumReplyUpdate) -> Optional[ForumReply]:
        return storage.update_forum_reply(record_id, data)

    @classmethod
    def _delete(cls, storage: Storage, record_id: int) -> bool:
        return storage.delete_forum_reply(record_id)

    @classmethod
    async def by_topic(cls, storage: Storage, topic_id: int) -> List[ForumReply]:
        """Replies of ``topic_id`` in creation order; empty for unknown topics."""
        return storage.get_forum_replies_by_topic(topic_id)
