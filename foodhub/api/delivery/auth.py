"""Courier Auth Router - courier app login."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db
from foodhub.schemas.auth import LoginRequest, TokenResponse
from foodhub.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def courier_login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """Courier login; only active or on-duty couriers get in, and they come online."""
    result: TokenResponse = await auth_service.login(db, "delivery", data)
    await db.commit()
    return result
