"""FastAPI dependency injection module - authentication and authorization.

Authentication Flow:
    1. Client sends ``Authorization: Bearer <token>``
    2. decode_token() verifies the JWT and returns its payload
    3. ``sub`` + ``type`` resolve the account in its own table
    4. Blocked accounts (deactivated admins/customers/restaurants,
       inactive or suspended couriers) are rejected

Authorization:
    - require_types(*types): the principal's ``type`` must be listed
    - require_permission(p): admins only; super admins bypass the check
"""

from dataclasses import dataclass
from typing import Annotated, Awaitable, Callable
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db
from foodhub.models.admin import Admin
from foodhub.models.customer import Customer
from foodhub.models.personnel import DeliveryPersonnel
from foodhub.models.restaurant import Restaurant, RestaurantUser
from foodhub.services.auth_service import Account, auth_service
from foodhub.services.restaurant_service import restaurant_service
from foodhub.utils.error_handlers import TOKEN_EXPIRED_MESSAGE, TOKEN_INVALID_MESSAGE
from foodhub.utils.exceptions import ForbiddenError, UnauthorizedError
from foodhub.utils.jwt import decode_token

# auto_error=False so a missing header gets our own 401 message
security: HTTPBearer = HTTPBearer(auto_error=False)


@dataclass
class Principal:
    """Authenticated caller: account id, JWT ``type`` and the loaded account."""

    id: UUID
    type: str
    account: Account


def _is_blocked(account: Account) -> bool:
    if isinstance(account, DeliveryPersonnel):
        return account.status in ("inactive", "suspended")
    return not account.is_active


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Principal:
    """Resolve the bearer token into a Principal.

    Raises:
        UnauthorizedError: Missing, expired or malformed token, or unknown account
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authorized, no token")

    try:
        payload: dict = decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError(TOKEN_EXPIRED_MESSAGE)
    except jwt.InvalidTokenError:
        raise UnauthorizedError(TOKEN_INVALID_MESSAGE)

    # Refresh tokens are not accepted as access tokens
    if payload.get("token_type") != "access":
        raise UnauthorizedError(TOKEN_INVALID_MESSAGE)
    try:
        account_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise UnauthorizedError(TOKEN_INVALID_MESSAGE)

    account_type: str = payload.get("type", "")
    account: Account | None = await auth_service.get_account(db, account_type, account_id)
    if account is None:
        raise UnauthorizedError("User not found")
    if _is_blocked(account):
        raise UnauthorizedError("Account is deactivated")

    return Principal(id=account.id, type=account_type, account=account)


def require_types(*types: str) -> Callable[..., Awaitable[Principal]]:
    """Dependency factory restricting an endpoint to some account types.

    Args:
        types: Allowed JWT ``type`` values

    Returns:
        FastAPI dependency returning the Principal or raising 403
    """
    async def _check(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        if principal.type not in types:
            raise ForbiddenError(f"Access denied. Required user type: {' or '.join(types)}")
        return principal
    return _check


def require_permission(permission: str) -> Callable[..., Awaitable[Admin]]:
    """Dependency factory requiring an admin permission (super admins bypass)."""
    async def _check(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Admin:
        account = principal.account
        if not isinstance(account, Admin):
            raise ForbiddenError("Access denied. Required user type: admin or super_admin")
        if not account.has_permission(permission):
            raise ForbiddenError(f"Access denied. Missing permission: {permission}")
        return account
    return _check


# Pre-configured audience dependencies
require_admin = require_types("admin", "super_admin")
require_super_admin = require_types("super_admin")
require_customer_type = require_types("customer")
require_restaurant_type = require_types("restaurant")
require_delivery_type = require_types("delivery")


async def get_current_admin(principal: Annotated[Principal, Depends(require_admin)]) -> Admin:
    return principal.account


async def get_current_super_admin(principal: Annotated[Principal, Depends(require_super_admin)]) -> Admin:
    return principal.account


async def get_current_customer(principal: Annotated[Principal, Depends(require_customer_type)]) -> Customer:
    return principal.account


async def get_current_restaurant_user(
    principal: Annotated[Principal, Depends(require_restaurant_type)],
) -> RestaurantUser:
    return principal.account


async def get_current_courier(
    principal: Annotated[Principal, Depends(require_delivery_type)],
) -> DeliveryPersonnel:
    return principal.account


async def get_owner_listing(
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Restaurant:
    """Public listing of the calling restaurant owner (400 until verified)."""
    return await restaurant_service.get_listing_for_owner(db, owner)
