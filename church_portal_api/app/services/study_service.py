"""
Business logic for bible-study articles, owned through ``author_id``.
"""

from typing import List, Optional

from ..core.storage import Storage
from ..schemas.study import Study, StudyCreate, StudyUpdate
from .content_service import OwnedContentService


class StudyService(OwnedContentService[Study]):
    label = "Study"
    owner_field = "author_id"

    @classmethod
    def _get(cls, storage: Storage, record_id: int) -> Optional[Study]:
        return storage.get_study(record_id)

    @classmethod
    def _create(cls, storage: Storage, data: StudyCreate) -> Study:
        return storage.create_study(data)

    @classmethod
    def _update(cls, storage: Storage, record_id: int, data: StudyUpdate) -> Optional[Study]:
        return storage.update_study(record_id, data)

    @classmethod
    def _delete(cls, storage: Storage, record_id: int) -> bool:
        return storage.delete_study(record_id)

    @classmethod
    def _list(cls, storage: Storage) -> List[Study]:
        return storage.get_all_studies()
