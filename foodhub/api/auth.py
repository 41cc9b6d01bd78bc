"""Common Auth Router - token refresh, logout, current principal, password change.

Shared by every account kind; logins and registrations live in the
audience routers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import Principal, get_current_principal
from foodhub.database import get_db
from foodhub.schemas.auth import ChangePasswordRequest, PrincipalResponse, RefreshRequest, TokenResponse
from foodhub.schemas.common import MessageResponse
from foodhub.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """Exchange a refresh token for a new token pair (the old one is revoked)."""
    result: TokenResponse = await auth_service.refresh(db, data.refresh_token)
    await db.commit()
    return result


@router.post("/logout", status_code=204)
async def logout(
    db: Annotated[AsyncSession, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    data: RefreshRequest | None = None,
) -> None:
    """Revoke the given refresh token, or every token of the caller."""
    await auth_service.logout(db, principal.account, data.refresh_token if data else None)
    await db.commit()


@router.get("/me", response_model=PrincipalResponse)
async def get_me(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> PrincipalResponse:
    return auth_service.me(principal.account)


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> MessageResponse:
    """Change the caller's password; all sessions must log in again."""
    await auth_service.change_password(db, principal.account, data)
    await db.commit()
    return MessageResponse(message="Password changed successfully")
