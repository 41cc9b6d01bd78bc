"""Auth Service - login, registration, token refresh and password changes.

Every account kind lives in its own table, so tokens identify a principal
by ``sub`` (account id) plus ``type`` (admin | super_admin | customer |
restaurant | delivery). Admins and super admins share the ``admins`` table.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.config import settings
from foodhub.models.admin import Admin
from foodhub.models.customer import Customer
from foodhub.models.personnel import WORKING_STATUSES, DeliveryPersonnel
from foodhub.models.restaurant import RestaurantUser
from foodhub.repositories.admin_repository import admin_repository
from foodhub.repositories.auth_repository import auth_repository
from foodhub.repositories.customer_repository import customer_repository
from foodhub.repositories.personnel_repository import personnel_repository
from foodhub.repositories.restaurant_repository import restaurant_user_repository
from foodhub.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    PrincipalResponse,
    TokenResponse,
)
from foodhub.schemas.customer import CustomerRegister
from foodhub.schemas.restaurant import RestaurantRegister
from foodhub.utils.clock import as_utc, utcnow
from foodhub.utils.exceptions import (
    BadRequestError,
    DuplicateError,
    LockedError,
    UnauthorizedError,
)
from foodhub.utils.jwt import create_access_token, create_refresh_token, decode_token
from foodhub.utils.password import hash_password, verify_password

logger = logging.getLogger(__name__)

ACCOUNT_TYPES: tuple[str, ...] = ("admin", "super_admin", "customer", "restaurant", "delivery")

Account = Admin | Customer | RestaurantUser | DeliveryPersonnel

_REPOSITORIES: dict[str, Any] = {
    "admin": admin_repository,
    "super_admin": admin_repository,
    "customer": customer_repository,
    "restaurant": restaurant_user_repository,
    "delivery": personnel_repository,
}


def account_token_type(account: Account) -> str:
    """JWT ``type`` claim for an account instance."""
    if isinstance(account, Admin):
        return account.token_type
    if isinstance(account, Customer):
        return "customer"
    if isinstance(account, RestaurantUser):
        return "restaurant"
    return "delivery"


def account_display_name(account: Account) -> str:
    if isinstance(account, RestaurantUser):
        return account.restaurant_name
    return account.name


def account_is_active(account: Account) -> bool:
    if isinstance(account, DeliveryPersonnel):
        return account.status in WORKING_STATUSES
    return bool(account.is_active)


class AuthService:
    """Service handling authentication for every account kind."""

    async def get_account(self, db: AsyncSession, account_type: str, account_id: UUID) -> Account | None:
        """Load the account behind a token's ``sub`` / ``type`` claims.

        A token whose ``type`` disagrees with the stored admin role (e.g. a
        demoted super admin) resolves to None.
        """
        repository = _REPOSITORIES.get(account_type)
        if repository is None:
            return None
        account = await repository.get_by_id(db, account_id)
        if account is None:
            return None
        if isinstance(account, Admin) and account.token_type != account_type:
            return None
        return account

    async def _generate_tokens(self, db: AsyncSession, account: Account) -> TokenResponse:
        """Issue an access/refresh pair and persist the refresh token.

        Args:
            db: Async database session
            account: Authenticated account

        Returns:
            TokenResponse: Token pair plus the account type and id
        """
        account_type: str = account_token_type(account)
        payload: dict[str, str] = {"sub": str(account.id), "type": account_type}
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        expires_at: datetime = datetime.now(timezone.utc) + timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
        await auth_repository.create_refresh_token(
            db,
            principal_id=account.id,
            principal_type=account_type,
            token=refresh_token,
            expires_at=expires_at,
        )

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            account_type=account_type,
            account_id=str(account.id),
        )

    async def _reject_login(self, db: AsyncSession, account: Account | None) -> None:
        """Count a failed attempt and raise 401.

        The counter is committed before raising so the lockout survives the
        failed request.
        """
        if account is not None and hasattr(account, "register_failed_login"):
            account.register_failed_login()
            await db.commit()
            if account.is_locked():
                logger.warning("Account %s locked after %d failed logins", account.email, account.login_attempts)
        raise UnauthorizedError("Invalid email or password")

    async def login(self, db: AsyncSession, account_kind: str, data: LoginRequest) -> TokenResponse:
        """Authenticate one account kind with e-mail and password.

        Args:
            db: Async database session
            account_kind: admin | customer | restaurant | delivery
            data: Credentials

        Returns:
            TokenResponse: Issued tokens

        Raises:
            LockedError: Account locked after repeated failures
            UnauthorizedError: Bad credentials or inactive account
        """
        repository = _REPOSITORIES[account_kind]
        account: Account | None = await repository.get_by_email(db, data.email)

        if account is not None and hasattr(account, "is_locked") and account.is_locked():
            raise LockedError()

        if account is None or not verify_password(data.password, account.password_hash):
            await self._reject_login(db, account)

        if isinstance(account, DeliveryPersonnel):
            if account.status not in WORKING_STATUSES:
                raise UnauthorizedError(f"Account is {account.status}. Please contact your administrator.")
            account.last_login = utcnow()
            account.is_online = True
            account.last_active = account.last_login
        else:
            if not account.is_active:
                raise UnauthorizedError("Account is deactivated")
            account.register_successful_login()

        tokens: TokenResponse = await self._generate_tokens(db, account)
        logger.info("%s login: %s", tokens.account_type, account.email)
        return tokens

    async def register_customer(self, db: AsyncSession, data: CustomerRegister) -> TokenResponse:
        """Create a customer account and sign it in.

        Raises:
            DuplicateError: E-mail or phone already registered
        """
        if await customer_repository.email_or_phone_taken(db, data.email, data.phone):
            raise DuplicateError("Customer with this email or phone number already exists")

        customer: Customer = await customer_repository.create(
            db,
            {
                "name": data.name,
                "email": data.email,
                "phone": data.phone,
                "password_hash": hash_password(data.password),
            },
        )
        customer.register_successful_login()
        logger.info("Customer registered: %s", customer.email)
        return await self._generate_tokens(db, customer)

    async def register_restaurant(self, db: AsyncSession, data: RestaurantRegister) -> TokenResponse:
        """Create a restaurant owner account awaiting verification.

        Raises:
            DuplicateError: E-mail or business licence already registered
        """
        if await restaurant_user_repository.get_by_email(db, data.email) is not None:
            raise DuplicateError("Restaurant with this email already exists")
        if data.business_license and await restaurant_user_repository.exists(
            db, {"business_license": data.business_license}
        ):
            raise DuplicateError("Business license is already registered")

        values: dict[str, Any] = data.model_dump(exclude={"password"}, mode="json")
        values["password_hash"] = hash_password(data.password)
        owner: RestaurantUser = await restaurant_user_repository.create(db, values)
        owner.register_successful_login()
        logger.info("Restaurant registered: %s (%s)", owner.restaurant_name, owner.email)
        return await self._generate_tokens(db, owner)

    async def refresh(self, db: AsyncSession, refresh_token: str) -> TokenResponse:
        """Rotate a refresh token: the presented one is consumed.

        Raises:
            UnauthorizedError: Token invalid, unknown, expired, or its account gone
        """
        try:
            payload: dict[str, Any] = decode_token(refresh_token)
        except jwt.PyJWTError:
            raise UnauthorizedError("Invalid refresh token")

        if payload.get("token_type") != "refresh":
            raise UnauthorizedError("Invalid refresh token")

        stored = await auth_repository.get_refresh_token(db, refresh_token)
        if stored is None:
            raise UnauthorizedError("Refresh token not found or revoked")
        if as_utc(stored.expires_at) < utcnow():
            await auth_repository.delete_refresh_token(db, refresh_token)
            raise UnauthorizedError("Refresh token expired")

        account: Account | None = await self.get_account(db, payload.get("type", ""), stored.principal_id)
        if account is None or not account_is_active(account):
            raise UnauthorizedError("User not found")

        await auth_repository.delete_refresh_token(db, refresh_token)
        return await self._generate_tokens(db, account)

    async def logout(self, db: AsyncSession, account: Account, refresh_token: str | None = None) -> None:
        """Revoke one refresh token, or all of them when none is given."""
        if refresh_token:
            await auth_repository.delete_refresh_token(db, refresh_token)
        else:
            await auth_repository.delete_principal_tokens(db, account.id, account_token_type(account))

        if isinstance(account, Admin):
            account.last_logout_at = utcnow()
            account.logout_count = (account.logout_count or 0) + 1
        elif isinstance(account, DeliveryPersonnel):
            account.is_online = False
            account.last_active = utcnow()
        await db.flush()

    def me(self, account: Account) -> PrincipalResponse:
        return PrincipalResponse(
            id=str(account.id),
            type=account_token_type(account),
            email=account.email,
            name=account_display_name(account),
            is_active=account_is_active(account),
        )

    async def change_password(self, db: AsyncSession, account: Account, data: ChangePasswordRequest) -> None:
        """Replace the password and revoke every issued refresh token.

        Raises:
            BadRequestError: Current password incorrect or unchanged
        """
        if not verify_password(data.current_password, account.password_hash):
            raise BadRequestError("Current password is incorrect")
        if data.current_password == data.new_password:
            raise BadRequestError("New password must be different from the current password")

        account.password_hash = hash_password(data.new_password)
        await auth_repository.delete_principal_tokens(db, account.id, account_token_type(account))
        await db.flush()


# Singleton instance
auth_service: AuthService = AuthService()
