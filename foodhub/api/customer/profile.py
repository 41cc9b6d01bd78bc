"""Customer Profile Router - own profile and saved addresses."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_current_customer
from foodhub.database import get_db
from foodhub.models.customer import Customer
from foodhub.schemas.customer import AddressPayload, AddressUpdate, CustomerProfileUpdate, CustomerResponse
from foodhub.services.customer_service import customer_service

router: APIRouter = APIRouter()


@router.get("", response_model=CustomerResponse)
async def get_profile(
    customer: Annotated[Customer, Depends(get_current_customer)],
) -> CustomerResponse:
    return customer_service.get_profile(customer)


@router.put("", response_model=CustomerResponse)
async def update_profile(
    data: CustomerProfileUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    customer: Annotated[Customer, Depends(get_current_customer)],
) -> CustomerResponse:
    result: CustomerResponse = await customer_service.update_profile(db, customer, data)
    await db.commit()
    return result


@router.post("/addresses", response_model=CustomerResponse, status_code=201)
async def add_address(
    data: AddressPayload,
    db: Annotated[AsyncSession, Depends(get_db)],
    customer: Annotated[Customer, Depends(get_current_customer)],
) -> CustomerResponse:
    """Save an address; the first one (or one flagged default) becomes the default."""
    result: CustomerResponse = await customer_service.add_address(db, customer, data)
    await db.commit()
    return result


@router.put("/addresses/{address_id}", response_model=CustomerResponse)
async def update_address(
    address_id: str,
    data: AddressUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    customer: Annotated[Customer, Depends(get_current_customer)],
) -> CustomerResponse:
    result: CustomerResponse = await customer_service.update_address(db, customer, address_id, data)
    await db.commit()
    return result


@router.delete("/addresses/{address_id}", response_model=CustomerResponse)
async def delete_address(
    address_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    customer: Annotated[Customer, Depends(get_current_customer)],
) -> CustomerResponse:
    result: CustomerResponse = await customer_service.delete_address(db, customer, address_id)
    await db.commit()
    return result


@router.patch("/addresses/{address_id}/default", response_model=CustomerResponse)
async def set_default_address(
    address_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    customer: Annotated[Customer, Depends(get_current_customer)],
) -> CustomerResponse:
    result: CustomerResponse = await customer_service.set_default_address(db, customer, address_id)
    await db.commit()
    return result
