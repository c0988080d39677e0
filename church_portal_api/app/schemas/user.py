"""
Pydantic models for user data.

``User`` is the stored record and carries the password hash; it is
never returned by the API.  Responses use ``UserRead``, which has no
password field at all, so the hash cannot leak through serialization.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel, Role


class UserBase(CamelModel):
    username: str = Field(..., min_length=3, examples=["jdoe"])
    name: str = Field(..., min_length=1, examples=["John Doe"])
    email: str = Field(..., min_length=3, examples=["john@example.com"])
    role: Role = Field("member", examples=["member"])
    avatar_url: Optional[str] = None


class UserCreate(UserBase):
    """Schema for storing a new user; ``password`` is already hashed."""

    password: str


class User(UserCreate):
    """A stored user record."""

    id: int
    created_at: datetime


class UserRead(UserBase):
    """Schema for reading a user from the API (no password)."""

    id: int
    created_at: datetime


class UserUpdate(CamelModel):
    """Partial update of a user.  Only explicitly set fields are applied."""

    username: Optional[str] = Field(None, min_length=3)
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
    role: Optional[Role] = None
    avatar_url: Optional[str] = None
    password: Optional[str] = None


class UserAdminUpdate(CamelModel):
    """Body of ``PATCH /users/{id}``.

    There is deliberately no ``password`` field: passwords cannot be
    changed through the admin endpoint and a supplied value is ignored.
    """

    username: Optional[str] = Field(None, min_length=3)
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
    role: Optional[Role] = None
    avatar_url: Optional[str] = None


class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    avatar_url: Optional[str] = None


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)


class AuthResponse(CamelModel):
    user: UserRead
    access_token: str
    token_type: str = "bearer"


def to_read(user: User) -> UserRead:
    """Strip the password from a stored user."""
    return UserRead.model_validate(user.model_dump(exclude={"password"}))
