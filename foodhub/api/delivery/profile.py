"""Courier Profile Router - own profile, duty status and location."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_current_courier
from foodhub.database import get_db
from foodhub.models.personnel import DeliveryPersonnel
from foodhub.schemas.personnel import (
    CourierProfileUpdate,
    LocationUpdate,
    PersonnelResponse,
    PersonnelStatusUpdate,
)
from foodhub.services.personnel_service import personnel_service

router: APIRouter = APIRouter()


@router.get("", response_model=PersonnelResponse)
async def get_profile(
    courier: Annotated[DeliveryPersonnel, Depends(get_current_courier)],
) -> PersonnelResponse:
    return personnel_service.get_profile(courier)


@router.put("", response_model=PersonnelResponse)
async def update_profile(
    data: CourierProfileUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    courier: Annotated[DeliveryPersonnel, Depends(get_current_courier)],
) -> PersonnelResponse:
    result: PersonnelResponse = await personnel_service.update_own_profile(db, courier, data)
    await db.commit()
    return result


@router.patch("/status", response_model=PersonnelResponse)
async def update_status(
    data: PersonnelStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    courier: Annotated[DeliveryPersonnel, Depends(get_current_courier)],
) -> PersonnelResponse:
    """Go on or off duty (other statuses are admin-only)."""
    result: PersonnelResponse = await personnel_service.update_own_status(db, courier, data)
    await db.commit()
    return result


@router.patch("/location", response_model=PersonnelResponse)
async def update_location(
    data: LocationUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    courier: Annotated[DeliveryPersonnel, Depends(get_current_courier)],
) -> PersonnelResponse:
    result: PersonnelResponse = await personnel_service.update_location(db, courier.id, data)
    await db.commit()
    return result
