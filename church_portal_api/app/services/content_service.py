"""
Shared logic for owned content (events, studies, posts, forum topics
and replies).

Every owned record names its owner in one field (``created_by`` or
``author_id``).  Anyone authenticated may create; only the owner or an
administrator may update or delete.  Existence is checked before
ownership: a missing record is reported as not found even to a caller
who could never have changed it, and ``ForbiddenError`` is only raised
for records that exist.
"""

import logging
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from ..core.errors import ForbiddenError, NotFoundError
from ..core.security import Principal
from ..core.storage import Storage


R = TypeVar("R", bound=BaseModel)


def is_owner_or_admin(record: BaseModel, owner_field: str, principal: Principal) -> bool:
    return getattr(record, owner_field) == principal.id or principal.is_admin


class OwnedContentService(Generic[R]):
    """Base class for the owned content services.

    Subclasses set ``label`` (used in messages) and ``owner_field`` and
    implement the ``_get``/``_create``/``_update``/``_delete``/``_list``
    hooks against the matching ``Storage`` methods.
    """

    label = "Record"
    owner_field = "author_id"

    @classmethod
    def _logger(cls) -> logging.Logger:
        return logging.getLogger(cls.__module__)

    @classmethod
    def _get(cls, storage: Storage, record_id: int) -> Optional[R]:
        raise NotImplementedError

    @classmethod
    def _create(cls, storage: Storage, data: BaseModel) -> R:
        raise NotImplementedError

    @classmethod
    def _update(cls, storage: Storage, record_id: int, data: BaseModel) -> Optional[R]:
        raise NotImplementedError

    @classmethod
    def _delete(cls, storage: Storage, record_id: int) -> bool:
        raise NotImplementedError

    @classmethod
    def _list(cls, storage: Storage) -> List[R]:
        raise NotImplementedError

    @classmethod
    def not_found(cls) -> NotFoundError:
        return NotFoundError(f"{cls.label} not found")

    @classmethod
    async def list_all(cls, storage: Storage) -> List[R]:
        return cls._list(storage)

    @classmethod
    async def get(cls, storage: Storage, record_id: int) -> R:
        """Return the record or raise ``NotFoundError``."""
        record = cls._get(storage, record_id)
        if record is None:
            raise cls.not_found()
        return record

    @classmethod
    async def create(cls, storage: Storage, data: BaseModel, principal: Principal) -> R:
        """Store a new record.

        When the body does not name an owner the acting principal
        becomes the owner.
        """
        if getattr(data, cls.owner_field) is None:
            data = data.model_copy(update={cls.owner_field: principal.id})
        record = cls._create(storage, data)
        cls._logger().info("User %s created %s %s", principal.id, cls.label.lower(), record.id)
        return record

    @classmethod
    def _check_owner(cls, record: R, principal: Principal) -> None:
        if not is_owner_or_admin(record, cls.owner_field, principal):
            cls._logger().warning(
                "User %s may not modify %s %s owned by %s",
                principal.id,
                cls.label.lower(),
                record.id,
                getattr(record, cls.owner_field),
            )
            raise ForbiddenError("Forbidden")

    @classmethod
    async def update(cls, storage: Storage, record_id: int, updates: BaseModel, principal: Principal) -> R:
        """Apply a partial update on behalf of the owner or an admin.

        Raises ``NotFoundError`` if the record does not exist and
        ``ForbiddenError`` if it exists but the principal may not
        change it.
        """
        with storage.lock:
            existing = cls._get(storage, record_id)
            if existing is None:
                raise cls.not_found()
            cls._check_owner(existing, principal)
            updated = cls._update(storage, record_id, updates)
        if updated is None:
            raise cls.not_found()
        cls._logger().info("User %s updated %s %s", principal.id, cls.label.lower(), record_id)
        return updated

    @classmethod
    async def delete(cls, storage: Storage, record_id: int, principal: Principal) -> None:
        """Hard-delete a record on behalf of the owner or an admin."""
        with storage.lock:
            existing = cls._get(storage, record_id)
            if existing is None:
                raise cls.not_found()
            cls._check_owner(existing, principal)
            removed = cls._delete(storage, record_id)
        if not removed:
            raise cls.not_found()
        cls._logger().info("User %s deleted %s %s", principal.id, cls.label.lower(), record_id)
