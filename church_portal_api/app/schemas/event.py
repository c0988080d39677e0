"""
Pydantic models for event data.

``EventCreate`` is the request body for ``POST /events``; ``createdBy``
may be omitted, in which case the acting principal is stamped by the
service.  ``Event`` is the stored and returned record.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .common import CamelModel, ensure_utc


class EventBase(CamelModel):
    title: str = Field(..., min_length=1, examples=["Sunday Service"])
    description: Optional[str] = Field(None, examples=["Weekly worship service"])
    event_type: str = Field(..., min_length=1, examples=["service"])
    start_time: datetime = Field(..., examples=["2025-09-07T10:00:00Z"])
    end_time: datetime = Field(..., examples=["2025-09-07T11:30:00Z"])
    location: str = Field(..., min_length=1, examples=["Main Hall"])

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_timezone(cls, value):
        return ensure_utc(value)


class EventCreate(EventBase):
    """Schema for creating an event."""

    created_by: Optional[int] = None


class Event(EventBase):
    """A stored event."""

    id: int
    created_by: int
    created_at: datetime


class EventUpdate(CamelModel):
    """Schema for updating an event.

    All fields are optional; only provided fields will be updated.
    """

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    event_type: Optional[str] = Field(None, min_length=1)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = Field(None, min_length=1)
    created_by: Optional[int] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_timezone(cls, value):
        return ensure_utc(value)
