"""Password hashing and verification utility module.

Uses bcrypt directly for password storage.
Passwords are never stored in plain text.
"""

import bcrypt

from foodhub.config import settings


def hash_password(password: str) -> str:
    """Hash a plain text password using bcrypt.

    The cost factor comes from BCRYPT_ROUNDS (12 by default).

    Args:
        password: Plain text password to hash

    Returns:
        str: Bcrypt hash string (~60 chars)

    Example:
        hashed = hash_password("my-secret-password")
        # "$2b$12$LJ3m4ys3..."
    """
    salt: bytes = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a plain text password against a bcrypt hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Stored bcrypt hash, None for accounts without a password

    Returns:
        bool: True if password matches hash
    """
    if not hashed_password:
        return False
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )
