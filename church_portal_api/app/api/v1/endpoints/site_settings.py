"""
Site settings endpoints for API v1.

Anyone may read settings (the public site renders from them).  Only
administrators may change them, either one at a time or in a batch.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from church_portal_api.app.core.errors import NotFoundError, validation_message
from church_portal_api.app.core.security import Principal, require_admin
from church_portal_api.app.core.storage import Storage, get_storage
from church_portal_api.app.schemas.common import BatchResult
from church_portal_api.app.schemas.site_setting import SiteSetting, SiteSettingUpsert
from church_portal_api.app.services.settings_service import SettingsService


router = APIRouter()


@router.get("", response_model=List[SiteSetting])
async def list_settings(storage: Storage = Depends(get_storage)) -> List[SiteSetting]:
    return await SettingsService.list_settings(storage)


@router.get("/{key}", response_model=SiteSetting)
async def get_setting(key: str, storage: Storage = Depends(get_storage)) -> SiteSetting:
    try:
        return await SettingsService.get_setting(storage, key)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post(
    "",
    response_model=SiteSetting,
    responses={201: {"model": SiteSetting}},
    openapi_extra=validation_message("Invalid site setting data"),
)
async def upsert_setting(
    body: SiteSettingUpsert,
    response: Response,
    current_user: Principal = Depends(require_admin),
    storage: Storage = Depends(get_storage),
) -> SiteSetting:
    """Insert or update a setting by key.

    Answers 201 when the key was new and 200 when an existing setting
    was updated.
    """
    if not body.key:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Key is required")
    setting, created = await SettingsService.upsert(storage, body.key, body.value, current_user)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return setting


@router.post("/batch", response_model=BatchResult)
async def upsert_settings_batch(
    items: Any = Body(...),
    current_user: Principal = Depends(require_admin),
    storage: Storage = Depends(get_storage),
) -> BatchResult:
    """Upsert a list of ``{key, value}`` objects.

    Elements without a key are skipped.  The batch is applied item by
    item and is not rolled back if an item fails.
    """
    if not isinstance(items, list):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request body must be an array")
    count = await SettingsService.upsert_many(storage, items, current_user)
    return BatchResult(message="Settings updated", count=count)
