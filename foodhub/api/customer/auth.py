"""Customer Auth Router - sign-up and login."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db
from foodhub.schemas.auth import LoginRequest, TokenResponse
from foodhub.schemas.customer import CustomerRegister
from foodhub.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register_customer(
    data: CustomerRegister,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    result: TokenResponse = await auth_service.register_customer(db, data)
    await db.commit()
    return result


@router.post("/login", response_model=TokenResponse)
async def customer_login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    result: TokenResponse = await auth_service.login(db, "customer", data)
    await db.commit()
    return result
