"""Restaurant Profile Router - the owner's own account."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_current_restaurant_user
from foodhub.database import get_db
from foodhub.models.restaurant import RestaurantUser
from foodhub.schemas.restaurant import OpenStatusUpdate, RestaurantProfileUpdate, RestaurantUserResponse
from foodhub.services.restaurant_service import restaurant_service

router: APIRouter = APIRouter()


@router.get("", response_model=RestaurantUserResponse)
async def get_profile(
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
) -> RestaurantUserResponse:
    return await restaurant_service.get_profile(db, owner)


@router.put("", response_model=RestaurantUserResponse)
async def update_profile(
    data: RestaurantProfileUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
) -> RestaurantUserResponse:
    """Update the owner profile; public fields are mirrored onto the listing."""
    result: RestaurantUserResponse = await restaurant_service.update_profile(db, owner, data)
    await db.commit()
    return result


@router.patch("/open-status", response_model=RestaurantUserResponse)
async def set_open_status(
    data: OpenStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
) -> RestaurantUserResponse:
    result: RestaurantUserResponse = await restaurant_service.set_open_status(db, owner, data)
    await db.commit()
    return result
