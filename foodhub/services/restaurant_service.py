"""Restaurant Service - owner accounts, verification and public listings.

An owner account (RestaurantUser) registers and manages its profile; the
public listing (Restaurant) only exists once an admin approves the account
and is kept in sync with the owner's public fields afterwards.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.restaurant import Restaurant, RestaurantUser
from foodhub.models.zone import Zone
from foodhub.repositories.restaurant_repository import restaurant_repository, restaurant_user_repository
from foodhub.repositories.zone_repository import zone_repository
from foodhub.schemas.restaurant import (
    BulkVerifyRequest,
    BulkVerifyResult,
    OpenStatusUpdate,
    RestaurantAdminUpdate,
    RestaurantProfileUpdate,
    RestaurantResponse,
    RestaurantUserResponse,
    VerificationStats,
    VerifyRequest,
)
from foodhub.utils.clock import utcnow
from foodhub.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from foodhub.utils.ids import parse_uuid, try_parse_uuid

logger = logging.getLogger(__name__)

# Owner fields copied onto the public listing (owner attribute -> listing attribute)
_LISTING_FIELDS: dict[str, str] = {
    "restaurant_name": "name",
    "description": "description",
    "email": "email",
    "phone": "phone",
    "address": "address",
    "cuisine": "cuisine",
    "features": "features",
    "opening_hours": "opening_hours",
    "business_license": "business_license",
    "tax_id": "tax_id",
    "delivery_time_min": "delivery_time_min",
    "delivery_time_max": "delivery_time_max",
    "delivery_fee": "delivery_fee",
    "minimum_order": "minimum_order",
    "is_active": "is_active",
    "is_verified": "is_verified",
    "is_open": "is_open",
    "verified_by": "verified_by",
    "verified_at": "verified_at",
    "rejection_reason": "rejection_reason",
}

VERIFIABLE_STATUSES: tuple[str, ...] = ("pending", "under_review")


class RestaurantService:
    """Restaurant owner and listing service."""

    def _to_user_response(self, owner: RestaurantUser, restaurant_id: UUID | None = None) -> RestaurantUserResponse:
        return RestaurantUserResponse(
            id=str(owner.id),
            email=owner.email,
            restaurant_name=owner.restaurant_name,
            owner_name=owner.owner_name,
            phone=owner.phone,
            description=owner.description,
            address=dict(owner.address or {}),
            full_address=owner.full_address,
            business_license=owner.business_license,
            tax_id=owner.tax_id,
            established_year=owner.established_year,
            business_age=owner.business_age,
            cuisine=list(owner.cuisine or []),
            features=list(owner.features or []),
            opening_hours=dict(owner.opening_hours or {}),
            delivery_time_min=owner.delivery_time_min,
            delivery_time_max=owner.delivery_time_max,
            delivery_fee=owner.delivery_fee,
            minimum_order=owner.minimum_order,
            delivery_radius=owner.delivery_radius,
            is_active=owner.is_active,
            is_verified=owner.is_verified,
            is_open=owner.is_open,
            is_currently_open=owner.is_currently_open(),
            verification_status=owner.verification_status,
            verified_at=owner.verified_at,
            rejection_reason=owner.rejection_reason,
            rating_average=owner.rating_average or 0.0,
            rating_count=owner.rating_count or 0,
            total_orders=owner.total_orders or 0,
            total_revenue=owner.total_revenue or 0.0,
            average_order_value=owner.average_order_value,
            restaurant_id=str(restaurant_id) if restaurant_id else None,
            created_at=owner.created_at,
        )

    def _to_response(self, restaurant: Restaurant) -> RestaurantResponse:
        return RestaurantResponse(
            id=str(restaurant.id),
            owner_id=str(restaurant.owner_id),
            zone_id=str(restaurant.zone_id) if restaurant.zone_id else None,
            name=restaurant.name,
            description=restaurant.description,
            email=restaurant.email,
            phone=restaurant.phone,
            address=dict(restaurant.address or {}),
            full_address=restaurant.full_address,
            cuisine=list(restaurant.cuisine or []),
            features=list(restaurant.features or []),
            opening_hours=dict(restaurant.opening_hours or {}),
            delivery_time_min=restaurant.delivery_time_min,
            delivery_time_max=restaurant.delivery_time_max,
            delivery_fee=restaurant.delivery_fee,
            minimum_order=restaurant.minimum_order,
            is_active=restaurant.is_active,
            is_verified=restaurant.is_verified,
            is_open=restaurant.is_open,
            is_currently_open=restaurant.is_currently_open(),
            rating_average=restaurant.rating_average or 0.0,
            rating_count=restaurant.rating_count or 0,
            total_orders=restaurant.total_orders or 0,
            total_revenue=restaurant.total_revenue or 0.0,
        )

    async def _user_response(self, db: AsyncSession, owner: RestaurantUser) -> RestaurantUserResponse:
        listing: Restaurant | None = await restaurant_repository.get_by_owner(db, owner.id)
        return self._to_user_response(owner, listing.id if listing else None)

    async def _get_owner_or_404(self, db: AsyncSession, owner_id: UUID) -> RestaurantUser:
        owner: RestaurantUser | None = await restaurant_user_repository.get_by_id(db, owner_id)
        if owner is None:
            raise NotFoundError("Restaurant not found")
        return owner

    async def _sync_listing(self, db: AsyncSession, owner: RestaurantUser, create: bool = False) -> Restaurant | None:
        """Copy the owner's public fields onto its listing.

        Args:
            db: Async database session
            owner: Owner account
            create: Create the listing when missing (on approval)

        Returns:
            Restaurant | None: The listing, None when absent and not created
        """
        listing: Restaurant | None = await restaurant_repository.get_by_owner(db, owner.id)
        values: dict[str, Any] = {target: getattr(owner, source) for source, target in _LISTING_FIELDS.items()}
        if listing is None:
            if not create:
                return None
            listing = await restaurant_repository.create(db, {"owner_id": owner.id, **values})
            logger.info("Listing created for restaurant %s", owner.restaurant_name)
            return listing

        for field, value in values.items():
            setattr(listing, field, value)
        await db.flush()
        return listing

    async def _apply_profile(self, db: AsyncSession, owner: RestaurantUser, update_data: dict[str, Any]) -> None:
        licence = update_data.get("business_license")
        if licence and await restaurant_user_repository.exists(db, {"business_license": licence}, exclude_id=owner.id):
            raise DuplicateError("Business license is already registered")
        low = update_data.get("delivery_time_min", owner.delivery_time_min)
        high = update_data.get("delivery_time_max", owner.delivery_time_max)
        if low is not None and high is not None and high <= low:
            raise BadRequestError("Maximum delivery time must be greater than minimum delivery time")

        if "opening_hours" in update_data:
            update_data["opening_hours"] = {**(owner.opening_hours or {}), **update_data["opening_hours"]}
        for field, value in update_data.items():
            setattr(owner, field, value)
        await db.flush()

    # --- Owner self-service -----------------------------------------------

    async def get_profile(self, db: AsyncSession, owner: RestaurantUser) -> RestaurantUserResponse:
        return await self._user_response(db, owner)

    async def update_profile(
        self,
        db: AsyncSession,
        owner: RestaurantUser,
        data: RestaurantProfileUpdate,
    ) -> RestaurantUserResponse:
        await self._apply_profile(db, owner, data.model_dump(exclude_unset=True, mode="json"))
        await self._sync_listing(db, owner)
        await db.refresh(owner)
        return await self._user_response(db, owner)

    async def set_open_status(
        self,
        db: AsyncSession,
        owner: RestaurantUser,
        data: OpenStatusUpdate,
    ) -> RestaurantUserResponse:
        owner.is_open = data.is_open
        await db.flush()
        await self._sync_listing(db, owner)
        logger.info("Restaurant %s is now %s", owner.restaurant_name, "open" if data.is_open else "closed")
        return await self._user_response(db, owner)

    async def get_listing_for_owner(self, db: AsyncSession, owner: RestaurantUser) -> Restaurant:
        """The owner's public listing.

        Raises:
            BadRequestError: Account not approved yet
        """
        listing: Restaurant | None = await restaurant_repository.get_by_owner(db, owner.id)
        if listing is None:
            raise BadRequestError("Restaurant is not verified yet")
        return listing

    # --- Admin management --------------------------------------------------

    async def list_restaurants(
        self,
        db: AsyncSession,
        status: str | None = None,
        city: str | None = None,
        cuisine: str | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[RestaurantUserResponse], int]:
        owners, total = await restaurant_user_repository.get_list(db, status, city, cuisine, search, page, per_page)
        return [await self._user_response(db, o) for o in owners], total

    async def get_restaurant(self, db: AsyncSession, owner_id: UUID) -> RestaurantUserResponse:
        return await self._user_response(db, await self._get_owner_or_404(db, owner_id))

    async def update_restaurant(
        self,
        db: AsyncSession,
        owner_id: UUID,
        data: RestaurantAdminUpdate,
    ) -> RestaurantUserResponse:
        """Admin update: profile fields, activation and listing zone.

        Raises:
            NotFoundError: Unknown account or zone
            BadRequestError: Zone given before the listing exists
        """
        owner: RestaurantUser = await self._get_owner_or_404(db, owner_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True, mode="json")
        zone_value: str | None = update_data.pop("zone_id", None)

        await self._apply_profile(db, owner, update_data)
        listing: Restaurant | None = await self._sync_listing(db, owner)

        if zone_value is not None:
            if listing is None:
                raise BadRequestError("Restaurant must be approved before it can be assigned to a zone")
            await self._assign_zone(db, listing, parse_uuid(zone_value, "zone_id"))

        await db.refresh(owner)
        return await self._user_response(db, owner)

    async def _assign_zone(self, db: AsyncSession, listing: Restaurant, zone_id: UUID) -> None:
        zone: Zone | None = await zone_repository.get_by_id(db, zone_id)
        if zone is None:
            raise NotFoundError("Zone not found")
        if listing.zone_id == zone.id:
            return
        if listing.zone_id is not None:
            previous: Zone | None = await zone_repository.get_by_id(db, listing.zone_id)
            if previous is not None:
                previous.restaurant_count = max(0, (previous.restaurant_count or 0) - 1)
        zone.restaurant_count = (zone.restaurant_count or 0) + 1
        listing.zone_id = zone.id
        await db.flush()

    async def delete_restaurant(self, db: AsyncSession, owner_id: UUID) -> None:
        owner: RestaurantUser = await self._get_owner_or_404(db, owner_id)
        await restaurant_user_repository.delete(db, owner.id)
        logger.info("Restaurant %s deleted", owner.restaurant_name)

    # --- Verification -----------------------------------------------------

    async def get_verification_queue(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[RestaurantUserResponse], int]:
        owners, total = await restaurant_user_repository.get_verification_queue(db, page, per_page)
        return [self._to_user_response(o) for o in owners], total

    async def _decide(self, db: AsyncSession, owner: RestaurantUser, data: VerifyRequest, admin_id: UUID) -> None:
        if owner.verification_status not in VERIFIABLE_STATUSES:
            raise BadRequestError(f"Restaurant is already {owner.verification_status}")

        now = utcnow()
        if data.action == "approve":
            owner.verification_status = "approved"
            owner.is_verified = True
            owner.verified_by = admin_id
            owner.verified_at = now
            owner.rejection_reason = None
            owner.rejected_at = None
            await db.flush()
            await self._sync_listing(db, owner, create=True)
        else:
            owner.verification_status = "rejected"
            owner.is_verified = False
            owner.rejection_reason = data.reason
            owner.rejected_at = now
            await db.flush()
            await self._sync_listing(db, owner)
        logger.info("Restaurant %s %s by %s", owner.restaurant_name, owner.verification_status, admin_id)

    async def verify_restaurant(
        self,
        db: AsyncSession,
        owner_id: UUID,
        data: VerifyRequest,
        admin_id: UUID,
    ) -> RestaurantUserResponse:
        """Approve or reject a pending account.

        Raises:
            NotFoundError: Unknown account
            BadRequestError: Account already approved or rejected
        """
        owner: RestaurantUser = await self._get_owner_or_404(db, owner_id)
        await self._decide(db, owner, data, admin_id)
        await db.refresh(owner)
        return await self._user_response(db, owner)

    async def bulk_verify(self, db: AsyncSession, data: BulkVerifyRequest, admin_id: UUID) -> BulkVerifyResult:
        """Apply one decision to many accounts, skipping the ones that cannot take it."""
        processed: list[str] = []
        skipped: list[dict[str, str]] = []

        for raw_id in data.restaurant_ids:
            owner_id: UUID | None = try_parse_uuid(raw_id)
            owner: RestaurantUser | None = (
                await restaurant_user_repository.get_by_id(db, owner_id) if owner_id else None
            )
            if owner is None:
                skipped.append({"id": raw_id, "reason": "Restaurant not found"})
                continue
            if owner.verification_status not in VERIFIABLE_STATUSES:
                skipped.append({"id": raw_id, "reason": f"Restaurant is already {owner.verification_status}"})
                continue
            await self._decide(db, owner, data, admin_id)
            processed.append(raw_id)

        return BulkVerifyResult(processed=processed, skipped=skipped)

    async def get_verification_stats(self, db: AsyncSession) -> VerificationStats:
        counts: dict[str, int] = await restaurant_user_repository.count_by_verification_status(db)
        return VerificationStats(**counts, total=sum(counts.values()))

    # --- Public listings --------------------------------------------------

    async def list_public(
        self,
        db: AsyncSession,
        search: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[RestaurantResponse], int]:
        restaurants, total = await restaurant_repository.get_public_list(db, search, page, per_page)
        return [self._to_response(r) for r in restaurants], total

    async def get_listing_or_404(self, db: AsyncSession, restaurant_id: UUID) -> Restaurant:
        restaurant: Restaurant | None = await restaurant_repository.get_by_id(db, restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        return restaurant

    async def get_public_listing(self, db: AsyncSession, restaurant_id: UUID) -> Restaurant:
        restaurant: Restaurant | None = await restaurant_repository.get_by_id(db, restaurant_id)
        if restaurant is None or not (restaurant.is_active and restaurant.is_verified):
            raise NotFoundError("Restaurant not found")
        return restaurant

    async def get_public(self, db: AsyncSession, restaurant_id: UUID) -> RestaurantResponse:
        return self._to_response(await self.get_public_listing(db, restaurant_id))

    async def find_by_cuisine(self, db: AsyncSession, cuisine: str) -> list[RestaurantResponse]:
        return [self._to_response(r) for r in await restaurant_repository.find_by_cuisine(db, cuisine)]

    async def find_by_city(self, db: AsyncSession, city: str) -> list[RestaurantResponse]:
        return [self._to_response(r) for r in await restaurant_repository.find_by_city(db, city)]


# Singleton instance
restaurant_service: RestaurantService = RestaurantService()
