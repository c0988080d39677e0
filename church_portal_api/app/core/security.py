"""
Security helpers for password hashing and token authentication.

Access tokens are JWT-shaped strings (``header.payload.signature``)
signed with HMAC-SHA256 and base64url encoded.  The payload carries the
user id in ``sub``, a random ``jti`` used for logout revocation and an
``exp`` expiration timestamp.  Passwords are hashed with PBKDF2-HMAC
SHA-256 and stored as ``salthex$hashhex``.

The request-level gates live here as FastAPI dependencies:

* ``get_current_principal`` - any authenticated user (401 otherwise);
* ``require_admin`` - user with the ``admin`` role (403 for everyone
  else, anonymous callers included).
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import secrets
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .storage import Storage, get_storage


logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Create a signed token with the given claims.

    The payload is extended with ``exp`` (UNIX timestamp) and, unless
    already present, a random ``jti``.  Clients send the token in the
    ``Authorization`` header as ``Bearer <token>``.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"sub": "3"}``).
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.
    """
    to_encode = data.copy()
    exp_seconds = expires_delta if expires_delta is not None else settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    to_encode.setdefault("jti", secrets.token_hex(16))
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a token.

    Returns the payload if the signature matches and the token has not
    expired, otherwise ``None``.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    expected_sig = _sign(signing_input, settings.secret_key)
    try:
        actual_sig = _b64_url_decode(signature_b64)
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    if data.get("exp") is None or int(data["exp"]) < int(time.time()):
        return None
    return data


def hash_password(password: str) -> str:
    """Hash a password with a fresh 16-byte salt; returns ``salthex$hashhex``."""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored ``salthex$hashhex`` string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


def revoke_token(revoked: Dict[str, int], token_id: str, expires_at: int, now: Optional[int] = None) -> None:
    """Record ``token_id`` as revoked until ``expires_at``.

    Entries whose token has already expired are dropped on the way;
    such tokens fail ``decode_access_token`` anyway.
    """
    now = int(time.time()) if now is None else now
    for jti, exp in list(revoked.items()):
        if exp < now:
            del revoked[jti]
    revoked[token_id] = expires_at


@dataclass(frozen=True)
class Principal:
    """The authenticated actor of a request."""

    id: int
    role: str
    token_id: Optional[str] = None
    token_expires_at: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


security = HTTPBearer(auto_error=False)


def get_optional_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    storage: Storage = Depends(get_storage),
) -> Optional[Principal]:
    """Resolve the request's principal, or ``None`` when there is none.

    A missing header, a bad signature, an expired or revoked token and a
    token whose user no longer exists all count as anonymous.  The role
    is read from the stored user so that role changes apply at once.
    """
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    if not payload:
        return None
    token_id = payload.get("jti")
    if token_id in request.app.state.revoked_tokens:
        return None
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
    user = storage.get_user(user_id)
    if user is None:
        return None
    return Principal(id=user.id, role=user.role, token_id=token_id, token_expires_at=int(payload["exp"]))


def get_current_principal(principal: Optional[Principal] = Depends(get_optional_principal)) -> Principal:
    """Require an authenticated user; 401 otherwise."""
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


def require_admin(principal: Optional[Principal] = Depends(get_optional_principal)) -> Principal:
    """Admin-only routes answer 403 to anyone else, anonymous callers included."""
    if principal is None or not principal.is_admin:
        logger.warning("Admin-only route refused for %s", principal.id if principal else "anonymous")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return principal
