"""Password hashing, JWT issuance and password-reset tokens."""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import bcrypt
from jose import jwt

from jobbee.config import Config

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    """Hash a password with bcrypt and return it as text."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check a password against its bcrypt hash. Malformed hashes never match."""
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT whose ``id`` claim is the user id.

    Args:
        user_id: Stringified user ``_id``.
        expires_delta: Lifetime, defaults to ``Config.JWT_EXPIRES_MINUTES``.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=Config.JWT_EXPIRES_MINUTES))
    to_encode = {"id": str(user_id), "iat": now, "exp": expire}
    return jwt.encode(to_encode, Config.JWT_SECRET, algorithm=Config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify a JWT. Raises ``jose.JWTError`` (or ``ExpiredSignatureError``)."""
    return jwt.decode(token, Config.JWT_SECRET, algorithms=[Config.JWT_ALGORITHM])


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_reset_token() -> Tuple[str, str, datetime]:
    """
    Create a password-reset token.

    Returns the raw token (mailed to the user), its sha256 digest (stored) and
    the expiry time.
    """
    raw = secrets.token_hex(20)
    expire = datetime.now(timezone.utc) + timedelta(minutes=Config.RESET_TOKEN_EXPIRES_MINUTES)
    return raw, hash_reset_token(raw), expire
