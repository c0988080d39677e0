"""
Business logic for users.

Covers registration, credential checks, the admin user listing and
admin profile updates.  Stored users carry a password hash; everything
returned from here towards the API goes through ``to_read`` so the
hash never leaves the service.
"""

import logging
from typing import List, Optional

from pydantic import ValidationError

from ..core.errors import NotFoundError
from ..core.security import hash_password, verify_password
from ..core.storage import Storage
from ..schemas.user import RegisterRequest, User, UserAdminUpdate, UserCreate, UserRead, UserUpdate, to_read


logger = logging.getLogger(__name__)


class UserService:
    """Service for working with users."""

    @classmethod
    async def register(cls, storage: Storage, data: RegisterRequest) -> User:
        """Create a member account.

        The first account ever registered becomes an administrator so a
        fresh installation can be managed.  Raises ``ValueError`` if the
        username is taken (exact, case-sensitive comparison).
        """
        with storage.lock:
            if storage.get_user_by_username(data.username) is not None:
                raise ValueError("Username already exists")
            role = "admin" if not storage.get_all_users() else "member"
            user = storage.create_user(
                UserCreate(
                    username=data.username,
                    password=hash_password(data.password),
                    name=data.name,
                    email=data.email,
                    role=role,
                    avatar_url=data.avatar_url,
                )
            )
        logger.info("Registered user %s (%s) as %s", user.id, user.username, user.role)
        return user

    @classmethod
    async def authenticate(cls, storage: Storage, username: str, password: str) -> Optional[User]:
        """Return the user if the credentials match, otherwise ``None``."""
        user = storage.get_user_by_username(username)
        if user is None or not verify_password(password, user.password):
            logger.info("Failed login for %s", username)
            return None
        return user

    @classmethod
    async def get_user(cls, storage: Storage, user_id: int) -> UserRead:
        user = storage.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return to_read(user)

    @classmethod
    async def list_users(cls, storage: Storage) -> List[UserRead]:
        return [to_read(user) for user in storage.get_all_users()]

    @classmethod
    async def update_user(cls, storage: Storage, user_id: int, updates: UserAdminUpdate) -> UserRead:
        """Apply an administrator's changes to a user profile.

        Passwords cannot be changed here.  Raises ``NotFoundError`` for
        unknown ids and ``ValueError`` when the new username belongs to
        another user.
        """
        changes = UserUpdate.model_validate(updates.model_dump(exclude_unset=True))
        with storage.lock:
            if storage.get_user(user_id) is None:
                raise NotFoundError("User not found")
            if changes.username is not None:
                other = storage.get_user_by_username(changes.username)
                if other is not None and other.id != user_id:
                    raise ValueError("Username already exists")
            updated = storage.update_user(user_id, changes)
        if updated is None:
            raise NotFoundError("User not found")
        logger.info("Updated user %s: %s", user_id, sorted(changes.model_fields_set))
        return to_read(updated)

    @classmethod
    async def ensure_admin(cls, storage: Storage, username: str, password: str, email: str) -> Optional[User]:
        """Create the bootstrap administrator unless the username exists.

        The credentials must satisfy the registration rules.  Invalid
        ones are logged and skipped so a bad setting does not prevent
        the application from starting.
        """
        try:
            data = RegisterRequest(username=username, password=password, name=username, email=email)
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][-1]) for err in e.errors())
            logger.warning("Bootstrap administrator not created: invalid %s", fields)
            return None
        with storage.lock:
            if storage.get_user_by_username(data.username) is not None:
                return None
            user = storage.create_user(
                UserCreate(
                    username=data.username,
                    password=hash_password(data.password),
                    name=data.name,
                    email=data.email,
                    role="admin",
                )
            )
        logger.info("Created bootstrap administrator %s", user.username)
        return user
