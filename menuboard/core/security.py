"""
Password hashing and the bearer tokens dashboard owners sign in with.

Display clients never hold a token; they are bound by pairing code only.
"""
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import jwt, JWTError

from menuboard.core.config import get_settings

settings = get_settings()

ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_access_token(subject: str | Any, expires_delta: timedelta | None = None) -> str:
    """Sign a token for ``subject`` (a user id), valid for ACCESS_TOKEN_EXPIRE_MINUTES by default."""
    lifetime = expires_delta if expires_delta is not None else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(subject),
        "exp": datetime.now(timezone.utc) + lifetime,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict | None:
    """Claims of a correctly signed, unexpired token, or None."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def user_id_from_token(token: str) -> str | None:
    """
    Return the user id an access token was issued for.

    Shared by the HTTP bearer dependency and dashboard socket joins.
    """
    claims = decode_token(token)
    if claims is None or claims.get("type") != ACCESS_TOKEN_TYPE:
        return None
    return claims.get("sub")
