"""
Pydantic models for site settings.

Site settings are a generic key/value store used by the site appearance
editor.  Values are always stored as strings; the upsert bodies accept
any JSON value and convert it with ``coerce_value``.
"""

import json
from datetime import datetime
from typing import Any, Optional

from .common import CamelModel


class SiteSettingCreate(CamelModel):
    key: str
    value: str
    updated_by: int


class SiteSetting(SiteSettingCreate):
    id: int
    updated_at: datetime


class SiteSettingUpdate(CamelModel):
    key: Optional[str] = None
    value: Optional[str] = None
    updated_by: Optional[int] = None


class SiteSettingUpsert(CamelModel):
    """Body of ``POST /site-settings``.  A missing ``key`` is rejected by the route."""

    key: Optional[str] = None
    value: Any = None


def coerce_value(value: Any) -> str:
    """Convert an arbitrary JSON value to the stored string form."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)
