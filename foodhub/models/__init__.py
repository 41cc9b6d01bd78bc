"""SQLAlchemy ORM models package - central import point for all domain models.

Importing from this package registers every model with the metadata, which
``Base.metadata.create_all`` and relationship resolution rely on.

Modules:
    admin: Admin and super-admin accounts
    customer: Customer accounts with addresses and loyalty data
    restaurant: Restaurant owner accounts and public listings
    zone: Delivery zones
    personnel: Delivery personnel (couriers)
    order: Orders
    delivery: Courier deliveries
    analytics: Delivery analytics, daily sales, restaurant stats
    menu: Menu categories and items
    review: Restaurant reviews
    notification: In-app notifications
    token: Refresh tokens
"""

from foodhub.models.admin import Admin
from foodhub.models.customer import Customer
from foodhub.models.restaurant import Restaurant, RestaurantUser
from foodhub.models.zone import Zone
from foodhub.models.personnel import DeliveryPersonnel
from foodhub.models.order import Order
from foodhub.models.delivery import Delivery
from foodhub.models.analytics import DailySales, DeliveryAnalytics, RestaurantStats
from foodhub.models.menu import MenuCategory, MenuItem
from foodhub.models.review import Review
from foodhub.models.notification import Notification
from foodhub.models.token import RefreshToken

__all__ = [
    "Admin",
    "Customer",
    "Restaurant", "RestaurantUser",
    "Zone",
    "DeliveryPersonnel",
    "Order",
    "Delivery",
    "DailySales", "DeliveryAnalytics", "RestaurantStats",
    "MenuCategory", "MenuItem",
    "Review",
    "Notification",
    "RefreshToken",
]
