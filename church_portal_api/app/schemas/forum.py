"""
Pydantic models for the discussion forum: topics and their replies.

A reply references its topic by ``topic_id``; the reference is not
enforced, so replies may outlive the topic they belong to.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel


class ForumTopicBase(CamelModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, examples=["prayer"])


class ForumTopicCreate(ForumTopicBase):
    author_id: Optional[int] = None


class ForumTopic(ForumTopicBase):
    id: int
    author_id: int
    created_at: datetime


class ForumTopicUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    author_id: Optional[int] = None


class ForumReplyBase(CamelModel):
    content: str = Field(..., min_length=1)
    topic_id: int


class ForumReplyCreate(ForumReplyBase):
    author_id: Optional[int] = None


class ForumReply(ForumReplyBase):
    id: int
    author_id: int
    created_at: datetime


class ForumReplyUpdate(CamelModel):
    content: Optional[str] = Field(None, min_length=1)
    topic_id: Optional[int] = None
    author_id: Optional[int] = None
