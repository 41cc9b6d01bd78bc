"""UUID parsing helpers for ids that arrive inside request bodies.

Path parameters are typed as ``UUID`` and rejected by FastAPI; body fields
carry ids as strings and go through ``parse_uuid``.
"""

from uuid import UUID

from foodhub.utils.exceptions import BadRequestError


def parse_uuid(value: str, field: str = "id") -> UUID:
    """Parse ``value`` or raise 400 ``Invalid {field}: {value}``."""
    try:
        return UUID(str(value))
    except ValueError:
        raise BadRequestError(f"Invalid {field}: {value}")


def try_parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(str(value))
    except ValueError:
        return None
