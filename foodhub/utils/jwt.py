"""JWT token creation and verification utility module.

Provides functions for creating access/refresh tokens and decoding them.

JWT Payload Structure:
    Both access and refresh tokens share the same base payload:
    {
        "sub": "account_uuid",          # Account identifier
        "type": "customer",             # Account kind: admin | super_admin | customer | restaurant | delivery
        "exp": 1234567890,              # Expiration (UNIX timestamp)
        "token_type": "access"|"refresh"
    }
"""

from datetime import datetime, timedelta, timezone
import uuid
from typing import Any

import jwt

from foodhub.config import settings


def create_access_token(data: dict[str, Any]) -> str:
    """Generate a JWT access token with the given payload data.

    Token expires after JWT_ACCESS_TOKEN_EXPIRE_MINUTES.

    Args:
        data: JWT payload data, typically {"sub": account_id, "type": account_type}

    Returns:
        str: Encoded JWT token string

    Example:
        token = create_access_token({"sub": str(customer.id), "type": "customer"})
    """
    to_encode: dict[str, Any] = data.copy()
    expire: datetime = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire, "token_type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_refresh_token(data: dict[str, Any]) -> str:
    """Generate a JWT refresh token with the given payload data.

    Token expires after JWT_REFRESH_TOKEN_EXPIRE_DAYS. A random ``jti`` is
    added so two tokens issued in the same second never collide.

    Args:
        data: JWT payload data, same structure as the access token

    Returns:
        str: Encoded JWT refresh token string
    """
    to_encode: dict[str, Any] = data.copy()
    expire: datetime = datetime.now(timezone.utc) + timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode.update({"exp": expire, "token_type": "refresh", "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT token string.

    Args:
        token: Encoded JWT token string

    Returns:
        dict[str, Any]: Decoded payload dictionary

    Raises:
        jwt.ExpiredSignatureError: When the token has expired
        jwt.InvalidTokenError: When the token is invalid
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
