"""
Business logic for blog posts.

The ``is_published`` flag has no transition rules: the author or an
administrator may flip it in either direction at any time.
"""

from typing import List, Optional

from ..core.storage import Storage
from ..schemas.post import Post, PostCreate, PostUpdate
from .content_service import OwnedContentService


class PostService(OwnedContentService[Post]):
    label = "Post"
    owner_field = "author_id"

    @classmethod
    def _get(cls, storage: Storage, record_id: int) -> Optional[Post]:
        return storage.get_post(record_id)

    @classmethod
    def _create(cls, storage: Storage, data: PostCreate) -> Post:
        return storage.create_post(data)

    @classmethod
    def _update(cls, storage: Storage, record_id: int, data: PostUpdate) -> Optional[Post]:
        return storage.update_post(record_id, data)

    @classmethod
    def _delete(cls, storage: Storage, record_id: int) -> bool:
        return storage.delete_post(record_id)

    @classmethod
    def _list(cls, storage: Storage) -> List[Post]:
        return storage.get_all_posts()
