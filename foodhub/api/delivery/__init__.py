"""Delivery API Router package - the courier app."""

from fastapi import APIRouter

from foodhub.api.delivery.auth import router as auth_router
from foodhub.api.delivery.deliveries import router as deliveries_router
from foodhub.api.delivery.profile import router as profile_router

delivery_router: APIRouter = APIRouter()

delivery_router.include_router(auth_router, prefix="/auth", tags=["Courier Auth"])
delivery_router.include_router(profile_router, prefix="/profile", tags=["Courier Profile"])
delivery_router.include_router(deliveries_router, prefix="/deliveries", tags=["Courier Deliveries"])
