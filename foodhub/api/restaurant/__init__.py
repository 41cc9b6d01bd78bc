"""Restaurant API Router package - the restaurant owner portal."""

from fastapi import APIRouter

from foodhub.api.restaurant.auth import router as auth_router
from foodhub.api.restaurant.dashboard import router as dashboard_router
from foodhub.api.restaurant.menu import router as menu_router
from foodhub.api.restaurant.orders import router as orders_router
from foodhub.api.restaurant.profile import router as profile_router
from foodhub.api.restaurant.reviews import router as reviews_router

restaurant_router: APIRouter = APIRouter()

restaurant_router.include_router(auth_router, prefix="/auth", tags=["Restaurant Auth"])
restaurant_router.include_router(profile_router, prefix="/profile", tags=["Restaurant Profile"])
restaurant_router.include_router(menu_router, prefix="/menu", tags=["Restaurant Menu"])
restaurant_router.include_router(orders_router, prefix="/orders", tags=["Restaurant Orders"])
restaurant_router.include_router(reviews_router, prefix="/reviews", tags=["Restaurant Reviews"])
restaurant_router.include_router(dashboard_router, prefix="/dashboard", tags=["Restaurant Dashboard"])
