"""FastAPI application entry point - middleware and router registration.

Mounts one router per portal under ``/api/v1``: admin, restaurant, customer
and delivery, plus the shared auth and notification endpoints.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foodhub.api.admin import admin_router
from foodhub.api.auth import router as auth_router
from foodhub.api.customer import customer_router
from foodhub.api.delivery import delivery_router
from foodhub.api.notifications import router as notifications_router
from foodhub.api.restaurant import restaurant_router
from foodhub.config import settings
from foodhub.middleware.axiom_logging import AxiomLoggingMiddleware
from foodhub.utils.error_handlers import register_exception_handlers
from foodhub.utils.logger import setup_logging

setup_logging()

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

register_exception_handlers(app)

# Registered before CORS so every request is captured
app.add_middleware(AxiomLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "ok", "environment": settings.ENVIRONMENT}


app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(notifications_router, prefix="/api/v1/notifications", tags=["Notifications"])
app.include_router(admin_router, prefix="/api/v1/admin")
app.include_router(restaurant_router, prefix="/api/v1/restaurant")
app.include_router(customer_router, prefix="/api/v1/customer")
app.include_router(delivery_router, prefix="/api/v1/delivery")
