"""
Pydantic models for bible-study articles.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel


class StudyBase(CamelModel):
    title: str = Field(..., min_length=1, examples=["The Sermon on the Mount"])
    content: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, examples=["gospels"])
    file_url: Optional[str] = None


class StudyCreate(StudyBase):
    author_id: Optional[int] = None


class Study(StudyBase):
    id: int
    author_id: int
    created_at: datetime


class StudyUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    file_url: Optional[str] = None
    author_id: Optional[int] = None
