"""Customer API Router package - the customer app."""

from fastapi import APIRouter

from foodhub.api.customer.auth import router as auth_router
from foodhub.api.customer.orders import router as orders_router
from foodhub.api.customer.profile import router as profile_router
from foodhub.api.customer.restaurants import router as restaurants_router

customer_router: APIRouter = APIRouter()

customer_router.include_router(auth_router, prefix="/auth", tags=["Customer Auth"])
customer_router.include_router(profile_router, prefix="/profile", tags=["Customer Profile"])
customer_router.include_router(restaurants_router, prefix="/restaurants", tags=["Restaurants"])
# /orders, /reviews and /deliveries/{id}/rate
customer_router.include_router(orders_router, tags=["Customer Orders"])
