"""Restaurant Auth Router - owner registration and login."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db
from foodhub.schemas.auth import LoginRequest, TokenResponse
from foodhub.schemas.restaurant import RestaurantRegister
from foodhub.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register_restaurant(
    data: RestaurantRegister,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """Create an owner account; it stays pending until an admin approves it."""
    result: TokenResponse = await auth_service.register_restaurant(db, data)
    await db.commit()
    return result


@router.post("/login", response_model=TokenResponse)
async def restaurant_login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    result: TokenResponse = await auth_service.login(db, "restaurant", data)
    await db.commit()
    return result
