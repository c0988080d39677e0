"""
Pydantic models for blog posts.

``is_published`` defaults to ``True`` and can be toggled freely by the
author or an administrator; there are no publication state rules.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel


class PostBase(CamelModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    image_url: Optional[str] = None
    is_published: bool = True


class PostCreate(PostBase):
    author_id: Optional[int] = None


class Post(PostBase):
    id: int
    author_id: int
    created_at: datetime


class PostUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = None
    is_published: Optional[bool] = None
    author_id: Optional[int] = None
