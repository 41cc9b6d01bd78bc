"""Admin API Router package - aggregates every back-office endpoint.

Included routers:
    - auth: admin login
    - admins: admin accounts and own profile
    - zones / personnel: delivery network management
    - orders / deliveries: order lifecycle and courier tracking
    - restaurants / customers: account management and verification
    - analytics / dashboard: reporting and the DailySales export
    - notifications: notification management and broadcasts
"""

from fastapi import APIRouter

from foodhub.api.admin.admins import router as admins_router
from foodhub.api.admin.analytics import router as analytics_router
from foodhub.api.admin.auth import router as auth_router
from foodhub.api.admin.customers import router as customers_router
from foodhub.api.admin.dashboard import router as dashboard_router
from foodhub.api.admin.deliveries import router as deliveries_router
from foodhub.api.admin.notifications import router as notifications_router
from foodhub.api.admin.orders import router as orders_router
from foodhub.api.admin.personnel import router as personnel_router
from foodhub.api.admin.restaurants import router as restaurants_router
from foodhub.api.admin.zones import router as zones_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(auth_router, prefix="/auth", tags=["Admin Auth"])
admin_router.include_router(admins_router, prefix="/admins", tags=["Admins"])

# Delivery network
admin_router.include_router(zones_router, prefix="/zones", tags=["Zones"])
admin_router.include_router(personnel_router, prefix="/personnel", tags=["Delivery Personnel"])

# Orders and deliveries
admin_router.include_router(orders_router, prefix="/orders", tags=["Admin Orders"])
admin_router.include_router(deliveries_router, prefix="/deliveries", tags=["Deliveries"])

# Accounts
admin_router.include_router(restaurants_router, prefix="/restaurants", tags=["Admin Restaurants"])
admin_router.include_router(customers_router, prefix="/customers", tags=["Admin Customers"])

# Reporting
admin_router.include_router(analytics_router, prefix="/analytics", tags=["Analytics"])
admin_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])
admin_router.include_router(notifications_router, prefix="/notifications", tags=["Admin Notifications"])
