"""Admin Auth Router - back-office login.

Refresh, logout and profile endpoints are shared in foodhub.api.auth.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db
from foodhub.schemas.auth import LoginRequest, TokenResponse
from foodhub.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def admin_login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """Admin and super-admin login; the token type follows the stored role."""
    result: TokenResponse = await auth_service.login(db, "admin", data)
    await db.commit()
    return result
