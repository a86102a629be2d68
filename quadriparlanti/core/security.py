# /quadriparlanti/core/security.py

"""
Cryptographic helpers: password hashing and signed tokens.

Passwords are stored as salted PBKDF2-SHA256 digests. Session and action-link
tokens are HS256 JWTs signed with `BACKEND_API_KEY`; the `type` claim keeps an
invitation link from being replayed as a session.
"""

import base64
import hashlib
import hmac
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from .config import get_settings

PASSWORD_HASH_ITERATIONS = 310_000
TOKEN_ALGORITHM = "HS256"

ACCESS_TOKEN_TYPE = "access"
LINK_TOKEN_TYPES = ("invite", "magiclink", "recovery")

RANDOM_PASSWORD_LENGTH = 16
RANDOM_PASSWORD_CHARSET = string.ascii_letters + string.digits + "!@#$%^&*"


def hash_password(password: str) -> str:
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PASSWORD_HASH_ITERATIONS)
    return "pbkdf2_sha256${}${}${}".format(
        PASSWORD_HASH_ITERATIONS,
        base64.b64encode(salt).decode("ascii"),
        base64.b64encode(digest).decode("ascii"),
    )


def verify_password(password: str, stored: Optional[str]) -> bool:
    parts = (stored or "").split("$")
    if len(parts) != 4 or parts[0] != "pbkdf2_sha256":
        return False
    _, iter_text, salt_text, digest_text = parts
    try:
        iterations = int(iter_text)
        salt = base64.b64decode(salt_text.encode("ascii"), validate=True)
        expected = base64.b64decode(digest_text.encode("ascii"), validate=True)
    except ValueError:
        return False
    computed = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, max(1, iterations))
    return hmac.compare_digest(computed, expected)


def generate_random_password(length: int = RANDOM_PASSWORD_LENGTH) -> str:
    """Password for accounts whose owner will pick their own via an invitation link."""
    return "".join(secrets.choice(RANDOM_PASSWORD_CHARSET) for _ in range(length))


def _encode(claims: Dict[str, Any], expires_delta: timedelta) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {**claims, "iat": now, "exp": now + expires_delta}
    return jwt.encode(payload, settings.backend_api_key, algorithm=TOKEN_ALGORITHM)


def create_access_token(subject: str, email: str, role: str) -> str:
    settings = get_settings()
    return _encode(
        {"sub": subject, "email": email, "role": role, "type": ACCESS_TOKEN_TYPE},
        timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_link_token(subject: str, email: str, link_type: str) -> str:
    if link_type not in LINK_TOKEN_TYPES:
        raise ValueError(f"Unknown link type: {link_type}")
    settings = get_settings()
    return _encode(
        {"sub": subject, "email": email, "type": link_type},
        timedelta(hours=settings.link_expire_hours),
    )


def decode_token(token: str, expected_types=(ACCESS_TOKEN_TYPE,)) -> Optional[Dict[str, Any]]:
    """
    Returns the claims of a valid token of one of `expected_types`, or None
    when the token is malformed, expired, badly signed or of another type.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.backend_api_key, algorithms=[TOKEN_ALGORITHM])
    except jwt.PyJWTError:
        return None
    if claims.get("type") not in expected_types or not claims.get("sub"):
        return None
    return claims
