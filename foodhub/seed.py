"""Seed script - creates tables, a super admin, a sample zone and a courier.

Run once to bootstrap an empty database:

Usage:
    python -m foodhub.seed

Creates (each only when absent):
    - Super admin: superadmin@foodhub.com / admin123
    - Zone: "Central" with a flat delivery charge
    - Courier: courier@foodhub.com / courier123 in the Central zone
"""

import asyncio

from sqlalchemy import select

from foodhub.config import settings
from foodhub.database import Base, async_session, engine
from foodhub.models import Admin, DeliveryPersonnel, Zone
from foodhub.models.admin import ADMIN_PERMISSIONS
from foodhub.utils.password import hash_password

SUPER_ADMIN_EMAIL: str = "superadmin@foodhub.com"
COURIER_EMAIL: str = "courier@foodhub.com"


async def seed() -> None:
    """Seed the database with the initial accounts. Idempotent."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(select(Admin).where(Admin.email == SUPER_ADMIN_EMAIL))
        admin: Admin | None = result.scalar_one_or_none()
        if admin is None:
            admin = Admin(
                name="Super Admin",
                email=SUPER_ADMIN_EMAIL,
                password_hash=hash_password("admin123"),
                admin_id="SA001",
                role="super_admin",
                department="Management",
                permissions=list(ADMIN_PERMISSIONS),
                is_active=True,
                is_verified=True,
            )
            db.add(admin)
            await db.flush()  # admin.id is needed as the zone's creator

        result = await db.execute(select(Zone).where(Zone.name == "Central"))
        zone: Zone | None = result.scalar_one_or_none()
        if zone is None:
            zone = Zone(
                name="Central",
                description="City centre",
                areas=["Thamel", "Durbar Marg"],
                pincodes=["44600"],
                delivery_charge=settings.DEFAULT_DELIVERY_FEE,
                center_lat=settings.DEFAULT_LATITUDE,
                center_lng=settings.DEFAULT_LONGITUDE,
                created_by=admin.id,
            )
            db.add(zone)
            await db.flush()

        result = await db.execute(select(DeliveryPersonnel).where(DeliveryPersonnel.email == COURIER_EMAIL))
        if result.scalar_one_or_none() is None:
            db.add(
                DeliveryPersonnel(
                    name="Sample Courier",
                    email=COURIER_EMAIL,
                    phone="+9779800000000",
                    employee_id="EMP001",
                    password_hash=hash_password("courier123"),
                    zone_id=zone.id,
                    zone_name=zone.name,
                    vehicle_type="Motorcycle",
                    vehicle_number="BA 1 PA 1234",
                    current_lat=settings.DEFAULT_LATITUDE,
                    current_lng=settings.DEFAULT_LONGITUDE,
                    created_by=admin.id,
                )
            )

        await db.commit()
        print(f"Seeded: super admin={SUPER_ADMIN_EMAIL}, zone={zone.name}, courier={COURIER_EMAIL}")


if __name__ == "__main__":
    asyncio.run(seed())
