"""Restaurant Browsing Router - public listings (active and verified only).

No authentication required.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db
from foodhub.models.restaurant import Restaurant
from foodhub.schemas.menu import MenuItemResponse
from foodhub.schemas.restaurant import RestaurantResponse
from foodhub.services.menu_service import menu_service
from foodhub.services.restaurant_service import restaurant_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()


@router.get("", response_model=Page)
async def list_restaurants(
    db: Annotated[AsyncSession, Depends(get_db)],
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> Page:
    items, total = await restaurant_service.list_public(db, search, page, per_page)
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/cuisine/{cuisine}", response_model=list[RestaurantResponse])
async def find_by_cuisine(
    cuisine: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[RestaurantResponse]:
    return await restaurant_service.find_by_cuisine(db, cuisine)


@router.get("/city/{city}", response_model=list[RestaurantResponse])
async def find_by_city(
    city: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[RestaurantResponse]:
    return await restaurant_service.find_by_city(db, city)


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
async def get_restaurant(
    restaurant_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RestaurantResponse:
    return await restaurant_service.get_public(db, restaurant_id)


@router.get("/{restaurant_id}/menu", response_model=list[MenuItemResponse])
async def get_restaurant_menu(
    restaurant_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[MenuItemResponse]:
    restaurant: Restaurant = await restaurant_service.get_public_listing(db, restaurant_id)
    return await menu_service.get_public_menu(db, restaurant)
