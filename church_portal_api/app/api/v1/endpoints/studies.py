"""
Bible-study endpoints for API v1.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from church_portal_api.app.core.errors import ForbiddenError, NotFoundError, validation_message
from church_portal_api.app.core.security import Principal, get_current_principal
from church_portal_api.app.core.storage import Storage, get_storage
from church_portal_api.app.schemas.common import Message
from church_portal_api.app.schemas.study import Study, StudyCreate, StudyUpdate
from church_portal_api.app.services.study_service import StudyService


router = APIRouter()


@router.get("", response_model=List[Study])
async def list_studies(storage: Storage = Depends(get_storage)) -> List[Study]:
    return await StudyService.list_all(storage)


@router.get("/{study_id}", response_model=Study)
async def get_study(study_id: int, storage: Storage = Depends(get_storage)) -> Study:
    try:
        return await StudyService.get(storage, study_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post(
    "",
    response_model=Study,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=validation_message("Invalid study data"),
)
async def create_study(
    study: StudyCreate,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> Study:
    return await StudyService.create(storage, study, current_user)


@router.patch("/{study_id}", response_model=Study, openapi_extra=validation_message("Invalid study data"))
async def update_study(
    study_id: int,
    updates: StudyUpdate,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> Study:
    """Only the author or an administrator may edit a study."""
    try:
        return await StudyService.update(storage, study_id, updates, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e


@router.delete("/{study_id}", response_model=Message)
async def delete_study(
    study_id: int,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> Message:
    try:
        await StudyService.delete(storage, study_id, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    return Message(message="Study deleted")
