"""Admin account request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from foodhub.models.admin import ADMIN_PERMISSIONS

_ROLE_PATTERN = r"^(super_admin|admin|moderator)$"
_DEPARTMENT_PATTERN = r"^(Management|Operations|Customer Service|IT|Finance)$"


def _check_permissions(value: list[str] | None) -> list[str] | None:
    if value is None:
        return value
    unknown = [p for p in value if p not in ADMIN_PERMISSIONS]
    if unknown:
        raise ValueError(f"Unknown permissions: {', '.join(unknown)}")
    return list(dict.fromkeys(value))


class AdminCreate(BaseModel):
    """Admin creation request (super admin only).

    Attributes:
        name: Display name
        email: Login e-mail
        password: Initial password (>= 6 chars)
        admin_id: Staff code, stored upper-cased
        role: super_admin | admin | moderator
        department: Management | Operations | Customer Service | IT | Finance
        permissions: Granted permission codes
    """

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    admin_id: str = Field(..., min_length=1, max_length=50)
    role: str = Field("admin", pattern=_ROLE_PATTERN)
    department: str = Field("Operations", pattern=_DEPARTMENT_PATTERN)
    permissions: list[str] = []
    phone: str | None = None

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, value: list[str] | None) -> list[str] | None:
        return _check_permissions(value)


class AdminProfileUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = None
    department: str | None = Field(None, pattern=_DEPARTMENT_PATTERN)


class AdminPermissionsUpdate(BaseModel):
    permissions: list[str]

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, value: list[str] | None) -> list[str] | None:
        return _check_permissions(value)


class AdminStatusUpdate(BaseModel):
    is_active: bool


class AdminResponse(BaseModel):
    id: str
    name: str
    email: str
    admin_id: str
    role: str
    type: str  # JWT type claim: admin | super_admin
    department: str
    permissions: list[str]
    phone: str | None = None
    is_active: bool
    is_verified: bool
    last_login: datetime | None = None
    login_count: int = 0
    created_at: datetime
