"""
Security helpers for password hashing and JWT authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC‑SHA256 signatures and base64url encoding.  Tokens embed
arbitrary claims and an expiration timestamp (``exp``).  Passwords are
hashed with PBKDF2‑HMAC/SHA‑256 and a random salt.

Accounts come from configuration: ``build_users`` creates the
``admin`` account with the roles ``admin`` and ``mitarbeiter``.  Write
endpoints guard themselves with ``require_roles``.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings

logger = logging.getLogger(__name__)

_PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], secret_key: str, expires_in: int) -> str:
    """Create a signed JWT token with the given payload.

    The payload is extended with an ``exp`` field ``expires_in``
    seconds from now.  Clients send the token back in the
    ``Authorization`` header as ``Bearer <token>``.
    """
    to_encode = data.copy()
    to_encode["exp"] = int(time.time()) + expires_in
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret_key: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT token.

    Returns the payload when the signature matches and the token has
    not expired, otherwise ``None``.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    try:
        actual_sig = _b64_url_decode(signature_b64)
        if not hmac.compare_digest(_sign(signing_input, secret_key), actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict) or data.get("exp") is None or int(data["exp"]) < int(time.time()):
        return None
    return data


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    The result is ``<salt hex>$<hash hex>``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored salt+hash string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


@dataclass(frozen=True)
class User:
    username: str
    password_hash: str
    roles: Tuple[str, ...]


def build_users(settings: Settings) -> Dict[str, User]:
    """Accounts known to the API, keyed by user name."""
    admin = User("admin", hash_password(settings.admin_password), ("admin", "mitarbeiter"))
    return {admin.username: admin}


def authenticate(users: Dict[str, User], username: str, password: str) -> Optional[User]:
    user = users.get(username)
    if user is None or not verify_password(password, user.password_hash):
        logger.debug("Login failed for %s", username)
        return None
    return user


security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict[str, Any]:
    """Dependency that retrieves the current authenticated user.

    Raises HTTP 401 when the ``Authorization`` header is missing, the
    token is invalid or expired, or its subject no longer exists.  On
    success returns the token payload with the user's ``roles``.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials, request.app.state.settings.secret_key)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = request.app.state.users.get(payload.get("sub"))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User no longer exists",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload["roles"] = list(user.roles)
    return payload


def require_roles(*roles: str) -> Callable[..., Dict[str, Any]]:
    """Dependency factory to enforce that the current user has one of ``roles``.

    Use via ``Depends(require_roles("admin"))``.  A user holding none of
    the roles gets HTTP 403.
    """

    def _role_dependency(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if not set(current_user.get("roles", ())) & set(roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _role_dependency
