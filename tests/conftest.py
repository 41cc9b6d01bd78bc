"""Test infrastructure - per-test database, session and httpx client fixtures.

Each test gets a fresh SQLite file (aiosqlite). Set TEST_DATABASE_URL to run
against another async database instead; its tables are dropped after every
test.
"""

import os

# Settings are read at import time; keep hashing fast and never touch Postgres
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from foodhub.database import Base, get_db
from foodhub.main import app
from foodhub.models import *  # noqa: F401,F403 - register all models with metadata
from foodhub.models import (
    Admin,
    Customer,
    DeliveryPersonnel,
    MenuCategory,
    MenuItem,
    Order,
    Restaurant,
    RestaurantUser,
    Zone,
)
from foodhub.utils.jwt import create_access_token
from foodhub.utils.password import hash_password

TEST_DATABASE_URL: str | None = os.environ.get("TEST_DATABASE_URL")


# ---------------------------------------------------------------------------
# Engine, session, client
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    url = TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    eng = create_async_engine(url, echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng

    if TEST_DATABASE_URL:
        async with eng.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Session shared by the test body and the app."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI test client using the test session."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------
async def _save(db: AsyncSession, obj: Any) -> Any:
    db.add(obj)
    await db.flush()
    await db.refresh(obj)
    return obj


@pytest_asyncio.fixture
async def super_admin(db: AsyncSession) -> Admin:
    return await _save(db, Admin(
        name="Root",
        email="root@foodhub.com",
        password_hash=hash_password("root123!"),
        admin_id="sa001",
        role="super_admin",
        department="Management",
    ))


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> Admin:
    """Regular admin holding every permission except user_support."""
    return await _save(db, Admin(
        name="Ops Admin",
        email="ops@foodhub.com",
        password_hash=hash_password("admin123!"),
        admin_id="ad001",
        role="admin",
        permissions=["manage_users", "manage_restaurants", "manage_orders", "view_analytics"],
    ))


@pytest_asyncio.fixture
async def limited_admin(db: AsyncSession) -> Admin:
    return await _save(db, Admin(
        name="Intern",
        email="intern@foodhub.com",
        password_hash=hash_password("intern123!"),
        admin_id="ad002",
        role="admin",
        permissions=[],
    ))


@pytest_asyncio.fixture
async def customer(db: AsyncSession) -> Customer:
    return await _save(db, Customer(
        name="Hungry Harriet",
        email="harriet@foodhub.com",
        phone="9800000001",
        password_hash=hash_password("customer123"),
        addresses=[{
            "id": "a1",
            "type": "home",
            "street": "1 Main Street",
            "city": "Kathmandu",
            "country": "Nepal",
            "is_default": True,
        }],
    ))


@pytest_asyncio.fixture
async def other_customer(db: AsyncSession) -> Customer:
    return await _save(db, Customer(
        name="Other Oscar",
        email="oscar@foodhub.com",
        phone="9800000002",
        password_hash=hash_password("customer123"),
    ))


@pytest_asyncio.fixture
async def zone(db: AsyncSession, super_admin: Admin) -> Zone:
    return await _save(db, Zone(
        name="Central",
        areas=["Thamel", "Durbar Marg"],
        pincodes=["44600"],
        delivery_charge=50.0,
        created_by=super_admin.id,
    ))


@pytest_asyncio.fixture
async def courier(db: AsyncSession, zone: Zone) -> DeliveryPersonnel:
    """Online, active courier in the Central zone."""
    return await _save(db, DeliveryPersonnel(
        name="Rapid Ram",
        email="ram@foodhub.com",
        phone="+9779811111111",
        employee_id="emp001",
        password_hash=hash_password("courier123"),
        zone_id=zone.id,
        zone_name=zone.name,
        vehicle_type="Motorcycle",
        vehicle_number="ba 1 pa 1111",
        status="active",
        is_online=True,
    ))


@pytest_asyncio.fixture
async def restaurant_owner(db: AsyncSession) -> RestaurantUser:
    """Approved restaurant owner account."""
    return await _save(db, RestaurantUser(
        email="owner@momo.com",
        password_hash=hash_password("owner123"),
        restaurant_name="Momo House",
        owner_name="Maya",
        phone="9800000010",
        address={"street": "5 Food Lane", "city": "Kathmandu"},
        cuisine=["Nepali", "Tibetan"],
        is_verified=True,
        is_open=True,
        verification_status="approved",
    ))


@pytest_asyncio.fixture
async def restaurant(db: AsyncSession, restaurant_owner: RestaurantUser, zone: Zone) -> Restaurant:
    """Active public listing of ``restaurant_owner``."""
    return await _save(db, Restaurant(
        owner_id=restaurant_owner.id,
        zone_id=zone.id,
        name=restaurant_owner.restaurant_name,
        email=restaurant_owner.email,
        phone=restaurant_owner.phone,
        address=dict(restaurant_owner.address),
        cuisine=list(restaurant_owner.cuisine),
        is_active=True,
        is_verified=True,
        is_open=True,
    ))


@pytest_asyncio.fixture
async def pending_owner(db: AsyncSession) -> RestaurantUser:
    return await _save(db, RestaurantUser(
        email="new@curry.com",
        password_hash=hash_password("owner123"),
        restaurant_name="Curry Corner",
        owner_name="Kiran",
        phone="9800000020",
        address={"street": "9 Spice Road", "city": "Pokhara"},
        cuisine=["Indian"],
    ))


@pytest_asyncio.fixture
async def menu_items(db: AsyncSession, restaurant_owner: RestaurantUser) -> dict[str, MenuItem]:
    """``restaurant_owner``'s menu: Chicken Momo (200) and Thukpa (150.5), by name."""
    category = await _save(db, MenuCategory(restaurant_id=restaurant_owner.id, name="Momo"))
    items = {}
    for name, price in (("Chicken Momo", 200.0), ("Thukpa", 150.5)):
        items[name] = await _save(db, MenuItem(
            restaurant_id=restaurant_owner.id, category_id=category.id, name=name, price=price,
        ))
    return items


async def make_order(
    db: AsyncSession,
    customer: Customer,
    restaurant: Restaurant,
    status: str = "placed",
    total: float = 550.0,
    delivery_fee: float = 50.0,
) -> Order:
    """Insert an order directly, bypassing the placement endpoint."""
    return await _save(db, Order(
        customer_id=customer.id,
        restaurant_id=restaurant.id,
        zone_id=restaurant.zone_id,
        items=[{"menu_item": {"name": "Momo", "price": total - delivery_fee}, "quantity": 1,
                "customizations": [], "subtotal": total - delivery_fee}],
        delivery_address={"street": "1 Main Street", "city": "Kathmandu"},
        subtotal=total - delivery_fee,
        delivery_fee=delivery_fee,
        total=total,
        status=status,
        tracking_updates=[{"status": status, "note": None}],
    ))


@pytest_asyncio.fixture
async def order(db: AsyncSession, customer: Customer, restaurant: Restaurant) -> Order:
    return await make_order(db, customer, restaurant)


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------
def make_token(account: Any, account_type: str) -> str:
    """Access token for ``account`` with the given JWT ``type`` claim."""
    return create_access_token({"sub": str(account.id), "type": account_type})


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def super_admin_headers(super_admin) -> dict[str, str]:
    return auth_header(make_token(super_admin, "super_admin"))


@pytest.fixture
def admin_headers(admin_user) -> dict[str, str]:
    return auth_header(make_token(admin_user, "admin"))


@pytest.fixture
def limited_admin_headers(limited_admin) -> dict[str, str]:
    return auth_header(make_token(limited_admin, "admin"))


@pytest.fixture
def customer_headers(customer) -> dict[str, str]:
    return auth_header(make_token(customer, "customer"))


@pytest.fixture
def other_customer_headers(other_customer) -> dict[str, str]:
    return auth_header(make_token(other_customer, "customer"))


@pytest.fixture
def owner_headers(restaurant_owner) -> dict[str, str]:
    return auth_header(make_token(restaurant_owner, "restaurant"))


@pytest.fixture
def courier_headers(courier) -> dict[str, str]:
    return auth_header(make_token(courier, "delivery"))
