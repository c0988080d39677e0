"""
Repository interface and in-memory implementation.

``Storage`` declares the capability set the route layer relies on:
create/get/update/delete/list per entity kind, plus the two derived
reads (upcoming events, replies of a topic) and the lookups by business
key (username, setting key).  ``MemStorage`` implements it with one
dictionary per kind.  Data lives only as long as the process; a
persistent implementation can be substituted without changing the
services or the routes.

Repository methods never raise for business reasons.  A miss is
reported as ``None`` (reads, updates) or ``False`` (deletes).
"""

import itertools
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import ContextManager, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from starlette.requests import Request

from ..schemas.common import utcnow
from ..schemas.event import Event, EventCreate, EventUpdate
from ..schemas.forum import (
    ForumReply,
    ForumReplyCreate,
    ForumReplyUpdate,
    ForumTopic,
    ForumTopicCreate,
    ForumTopicUpdate,
)
from ..schemas.post import Post, PostCreate, PostUpdate
from ..schemas.site_setting import SiteSetting, SiteSettingCreate, SiteSettingUpdate
from ..schemas.study import Study, StudyCreate, StudyUpdate
from ..schemas.user import User, UserCreate, UserUpdate


class Storage(ABC):
    """Abstract repository used by the services.

    ``lock`` must be a re-entrant lock such as ``threading.RLock()``.
    Services hold it across check-then-mutate sequences (ownership
    check followed by update or delete, settings upsert) so they are
    atomic with respect to other requests.
    """

    lock: ContextManager[bool]

    # Users
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, data: UserCreate) -> User: ...

    @abstractmethod
    def update_user(self, user_id: int, data: UserUpdate) -> Optional[User]: ...

    @abstractmethod
    def get_all_users(self) -> List[User]: ...

    # Events
    @abstractmethod
    def get_event(self, event_id: int) -> Optional[Event]: ...

    @abstractmethod
    def create_event(self, data: EventCreate) -> Event: ...

    @abstractmethod
    def update_event(self, event_id: int, data: EventUpdate) -> Optional[Event]: ...

    @abstractmethod
    def delete_event(self, event_id: int) -> bool: ...

    @abstractmethod
    def get_all_events(self) -> List[Event]: ...

    @abstractmethod
    def get_upcoming_events(self, count: int = 5) -> List[Event]: ...

    # Studies
    @abstractmethod
    def get_study(self, study_id: int) -> Optional[Study]: ...

    @abstractmethod
    def create_study(self, data: StudyCreate) -> Study: ...

    @abstractmethod
    def update_study(self, study_id: int, data: StudyUpdate) -> Optional[Study]: ...

    @abstractmethod
    def delete_study(self, study_id: int) -> bool: ...

    @abstractmethod
    def get_all_studies(self) -> List[Study]: ...

    # Posts
    @abstractmethod
    def get_post(self, post_id: int) -> Optional[Post]: ...

    @abstractmethod
    def create_post(self, data: PostCreate) -> Post: ...

    @abstractmethod
    def update_post(self, post_id: int, data: PostUpdate) -> Optional[Post]: ...

    @abstractmethod
    def delete_post(self, post_id: int) -> bool: ...

    @abstractmethod
    def get_all_posts(self) -> List[Post]: ...

    # Forum topics
    @abstractmethod
    def get_forum_topic(self, topic_id: int) -> Optional[ForumTopic]: ...

    @abstractmethod
    def create_forum_topic(self, data: ForumTopicCreate) -> ForumTopic: ...

    @abstractmethod
    def update_forum_topic(self, topic_id: int, data: ForumTopicUpdate) -> Optional[ForumTopic]: ...

    @abstractmethod
    def delete_forum_topic(self, topic_id: int) -> bool: ...

    @abstractmethod
    def get_all_forum_topics(self) -> List[ForumTopic]: ...

    # Forum replies
    @abstractmethod
    def get_forum_reply(self, reply_id: int) -> Optional[ForumReply]: ...

    @abstractmethod
    def create_forum_reply(self, data: ForumReplyCreate) -> ForumReply: ...

    @abstractmethod
    def update_forum_reply(self, reply_id: int, data: ForumReplyUpdate) -> Optional[ForumReply]: ...

    @abstractmethod
    def delete_forum_reply(self, reply_id: int) -> bool: ...

    @abstractmethod
    def get_forum_replies_by_topic(self, topic_id: int) -> List[ForumReply]: ...

    # Site settings
    @abstractmethod
    def get_site_setting(self, key: str) -> Optional[SiteSetting]: ...

    @abstractmethod
    def create_site_setting(self, data: SiteSettingCreate) -> SiteSetting: ...

    @abstractmethod
    def update_site_setting(self, setting_id: int, data: SiteSettingUpdate) -> Optional[SiteSetting]: ...

    @abstractmethod
    def get_all_site_settings(self) -> List[SiteSetting]: ...


R = TypeVar("R", bound=BaseModel)


class _Table(Generic[R]):
    """One in-memory collection: records keyed by id plus an id sequence.

    Ids start at 1 and are never reused, even after deletion.
    """

    def __init__(self, record_type: Type[R], stamp_field: str = "created_at") -> None:
        self.record_type = record_type
        self.stamp_field = stamp_field
        self.rows: Dict[int, R] = {}
        self._ids = itertools.count(1)

    def get(self, record_id: int) -> Optional[R]:
        row = self.rows.get(record_id)
        return row.model_copy() if row is not None else None

    def insert(self, data: BaseModel) -> R:
        record_id = next(self._ids)
        values = data.model_dump()
        values.update({"id": record_id, self.stamp_field: utcnow()})
        row = self.record_type.model_validate(values)
        self.rows[record_id] = row
        return row.model_copy()

    def update(self, record_id: int, data: BaseModel, restamp: bool = False) -> Optional[R]:
        existing = self.rows.get(record_id)
        if existing is None:
            return None
        changes = {}
        fields = self.record_type.model_fields
        for name, value in data.model_dump(exclude_unset=True).items():
            if name not in fields or name in ("id", self.stamp_field):
                continue
            # An explicit null only clears fields whose default is null.
            if value is None and (fields[name].is_required() or fields[name].default is not None):
                continue
            changes[name] = value
        if restamp:
            changes[self.stamp_field] = utcnow()
        row = existing.model_copy(update=changes)
        self.rows[record_id] = row
        return row.model_copy()

    def delete(self, record_id: int) -> bool:
        return self.rows.pop(record_id, None) is not None

    def all(self) -> List[R]:
        return [row.model_copy() for row in self.rows.values()]


class MemStorage(Storage):
    """Memory-only ``Storage``.  Everything is lost on restart."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._users: _Table[User] = _Table(User)
        self._events: _Table[Event] = _Table(Event)
        self._studies: _Table[Study] = _Table(Study)
        self._posts: _Table[Post] = _Table(Post)
        self._topics: _Table[ForumTopic] = _Table(ForumTopic)
        self._replies: _Table[ForumReply] = _Table(ForumReply)
        self._settings: _Table[SiteSetting] = _Table(SiteSetting, stamp_field="updated_at")

    # Users ---------------------------------------------------------------

    def get_user(self, user_id: int) -> Optional[User]:
        with self.lock:
            return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        # Exact, case-sensitive match.
        with self.lock:
            for user in self._users.rows.values():
                if user.username == username:
                    return user.model_copy()
            return None

    def create_user(self, data: UserCreate) -> User:
        with self.lock:
            return self._users.insert(data)

    def update_user(self, user_id: int, data: UserUpdate) -> Optional[User]:
        with self.lock:
            return self._users.update(user_id, data)

    def get_all_users(self) -> List[User]:
        with self.lock:
            return self._users.all()

    # Events --------------------------------------------------------------

    def get_event(self, event_id: int) -> Optional[Event]:
        with self.lock:
            return self._events.get(event_id)

    def create_event(self, data: EventCreate) -> Event:
        with self.lock:
            return self._events.insert(data)

    def update_event(self, event_id: int, data: EventUpdate) -> Optional[Event]:
        with self.lock:
            return self._events.update(event_id, data)

    def delete_event(self, event_id: int) -> bool:
        with self.lock:
            return self._events.delete(event_id)

    def get_all_events(self) -> List[Event]:
        with self.lock:
            return self._events.all()

    def get_upcoming_events(self, count: int = 5, now: Optional[datetime] = None) -> List[Event]:
        """Events starting after ``now``, soonest first, at most ``count``.

        ``sorted`` is stable, so events sharing a start time keep their
        insertion order.
        """
        if count <= 0:
            return []
        now = now or utcnow()
        with self.lock:
            upcoming = [event for event in self._events.all() if event.start_time > now]
        upcoming.sort(key=lambda event: event.start_time)
        return upcoming[:count]

    # Studies -------------------------------------------------------------

    def get_study(self, study_id: int) -> Optional[Study]:
        with self.lock:
            return self._studies.get(study_id)

    def create_study(self, data: StudyCreate) -> Study:
        with self.lock:
            return self._studies.insert(data)

    def update_study(self, study_id: int, data: StudyUpdate) -> Optional[Study]:
        with self.lock:
            return self._studies.update(study_id, data)

    def delete_study(self, study_id: int) -> bool:
        with self.lock:
            return self._studies.delete(study_id)

    def get_all_studies(self) -> List[Study]:
        with self.lock:
            return self._studies.all()

    # Posts ---------------------------------------------------------------

    def get_post(self, post_id: int) -> Optional[Post]:
        with self.lock:
            return self._posts.get(post_id)

    def create_post(self, data: PostCreate) -> Post:
        with self.lock:
            return self._posts.insert(data)

    def update_post(self, post_id: int, data: PostUpdate) -> Optional[Post]:
        with self.lock:
            return self._posts.update(post_id, data)

    def delete_post(self, post_id: int) -> bool:
        with self.lock:
            return self._posts.delete(post_id)

    def get_all_posts(self) -> List[Post]:
        with self.lock:
            return self._posts.all()

    # Forum topics --------------------------------------------------------

    def get_forum_topic(self, topic_id: int) -> Optional[ForumTopic]:
        with self.lock:
            return self._topics.get(topic_id)

    def create_forum_topic(self, data: ForumTopicCreate) -> ForumTopic:
        with self.lock:
            return self._topics.insert(data)

    def update_forum_topic(self, topic_id: int, data: ForumTopicUpdate) -> Optional[ForumTopic]:
        with self.lock:
            return self._topics.update(topic_id, data)

    def delete_forum_topic(self, topic_id: int) -> bool:
        with self.lock:
            return self._topics.delete(topic_id)

    def get_all_forum_topics(self) -> List[ForumTopic]:
        with self.lock:
            return self._topics.all()

    # Forum replies -------------------------------------------------------

    def get_forum_reply(self, reply_id: int) -> Optional[ForumReply]:
        with self.lock:
            return self._replies.get(reply_id)

    def create_forum_reply(self, data: ForumReplyCreate) -> ForumReply:
        with self.lock:
            return self._replies.insert(data)

    def update_forum_reply(self, reply_id: int, data: ForumReplyUpdate) -> Optional[ForumReply]:
        with self.lock:
            return self._replies.update(reply_id, data)

    def delete_forum_reply(self, reply_id: int) -> bool:
        with self.lock:
            return self._replies.delete(reply_id)

    def get_forum_replies_by_topic(self, topic_id: int) -> List[ForumReply]:
        """Replies of a topic in conversation order (creation time, then id)."""
        with self.lock:
            replies = [reply for reply in self._replies.all() if reply.topic_id == topic_id]
        replies.sort(key=lambda reply: (reply.created_at, reply.id))
        return replies

    # Site settings -------------------------------------------------------

    def get_site_setting(self, key: str) -> Optional[SiteSetting]:
        with self.lock:
            for setting in self._settings.rows.values():
                if setting.key == key:
                    return setting.model_copy()
            return None

    def create_site_setting(self, data: SiteSettingCreate) -> SiteSetting:
        with self.lock:
            return self._settings.insert(data)

    def update_site_setting(self, setting_id: int, data: SiteSettingUpdate) -> Optional[SiteSetting]:
        with self.lock:
            return self._settings.update(setting_id, data, restamp=True)

    def get_all_site_settings(self) -> List[SiteSetting]:
        with self.lock:
            return self._settings.all()


def get_storage(request: Request) -> Storage:
    """FastAPI dependency returning the repository bound to the application."""
    return request.app.state.storage
