"""
Service layer for site settings.

Settings are key/value pairs edited by administrators through the site
appearance editor.  ``upsert`` updates the record with the given key or
creates it; ``upsert_many`` applies a list of such changes one by one.

``upsert_many`` is not atomic.  Items are applied in order and an error
part way through leaves the earlier items applied.
"""

import logging
from typing import Any, Iterable, List, Tuple

from ..core.errors import NotFoundError
from ..core.security import Principal
from ..core.storage import Storage
from ..schemas.site_setting import (
    SiteSetting,
    SiteSettingCreate,
    SiteSettingUpdate,
    coerce_value,
)


logger = logging.getLogger(__name__)


class SettingsService:
    """Service for managing site settings."""

    @classmethod
    async def list_settings(cls, storage: Storage) -> List[SiteSetting]:
        return storage.get_all_site_settings()

    @classmethod
    async def get_setting(cls, storage: Storage, key: str) -> SiteSetting:
        setting = storage.get_site_setting(key)
        if setting is None:
            raise NotFoundError("Setting not found")
        return setting

    @classmethod
    async def upsert(cls, storage: Storage, key: str, value: Any, principal: Principal) -> Tuple[SiteSetting, bool]:
        """Insert or update a setting.

        Returns the stored setting and ``True`` if it was created,
        ``False`` if an existing one was updated.  The acting principal
        is recorded in ``updated_by``.
        """
        value = coerce_value(value)
        with storage.lock:
            existing = storage.get_site_setting(key)
            if existing is None:
                setting = storage.create_site_setting(
                    SiteSettingCreate(key=key, value=value, updated_by=principal.id)
                )
                created = True
            else:
                setting = storage.update_site_setting(
                    existing.id,
                    SiteSettingUpdate(key=key, value=value, updated_by=principal.id),
                )
                created = False
        logger.info("User %s %s setting %s", principal.id, "created" if created else "updated", key)
        return setting, created

    @classmethod
    async def upsert_many(cls, storage: Storage, items: Iterable[Any], principal: Principal) -> int:
        """Upsert every item carrying a non-empty ``key``; return how many were applied.

        Items that are not objects or have no key are skipped silently.
        """
        count = 0
        for item in items:
            if not isinstance(item, dict) or not item.get("key"):
                continue
            key = item["key"]
            if not isinstance(key, str):
                key = str(key)
            await cls.upsert(storage, key, item.get("value"), principal)
            count += 1
        logger.info("User %s applied %s settings in batch", principal.id, count)
        return count
