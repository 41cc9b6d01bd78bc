"""Authentication request/response schemas.

Covers login, token issuance/refresh, logout and password changes for
every account kind.
"""

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Login request schema shared by all account kinds.

    Attributes:
        email: Login e-mail
        password: Plain text password, verified against the bcrypt hash
    """

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """JWT token issuance response.

    Attributes:
        access_token: Short-lived access token
        refresh_token: Long-lived refresh token (persisted and rotated)
        token_type: Always "bearer"
        account_type: JWT ``type`` claim of the account
        account_id: Account UUID
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    account_type: str
    account_id: str


class RefreshRequest(BaseModel):
    refresh_token: str


class ChangePasswordRequest(BaseModel):
    """Password change request.

    Attributes:
        current_password: Existing password
        new_password: Replacement, at least 6 characters
    """

    current_password: str
    new_password: str = Field(..., min_length=6)


class PrincipalResponse(BaseModel):
    """Identity of the authenticated account (GET /auth/me)."""

    id: str
    type: str
    email: str
    name: str
    is_active: bool
