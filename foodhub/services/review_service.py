"""Review Service - customer reviews and restaurant replies."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.customer import Customer
from foodhub.models.order import Order
from foodhub.models.restaurant import Restaurant, RestaurantUser
from foodhub.models.review import Review
from foodhub.repositories.order_repository import order_repository
from foodhub.repositories.restaurant_repository import restaurant_repository, restaurant_user_repository
from foodhub.repositories.review_repository import review_repository
from foodhub.schemas.review import ReviewCreate, ReviewReport, ReviewRespond, ReviewResponse, ReviewStats
from foodhub.utils.clock import utcnow
from foodhub.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from foodhub.utils.ids import parse_uuid

logger = logging.getLogger(__name__)

_STAR_NAMES: dict[int, str] = {5: "five", 4: "four", 3: "three", 2: "two", 1: "one"}


class ReviewService:
    """Review service."""

    def _to_response(self, review: Review) -> ReviewResponse:
        return ReviewResponse(
            id=str(review.id),
            customer_id=str(review.customer_id),
            restaurant_id=str(review.restaurant_id),
            order_id=str(review.order_id),
            rating=review.rating,
            comment=review.comment,
            response=review.response,
            responded_at=review.responded_at,
            status=review.status,
            report_reason=review.report_reason,
            created_at=review.created_at,
        )

    async def _get_for_restaurant(self, db: AsyncSession, review_id: UUID, restaurant_id: UUID) -> Review:
        review: Review | None = await review_repository.get_by_id(db, review_id)
        if review is None or review.restaurant_id != restaurant_id:
            raise NotFoundError("Review not found")
        return review

    async def create_review(self, db: AsyncSession, customer: Customer, data: ReviewCreate) -> ReviewResponse:
        """Review one of the customer's delivered orders.

        Args:
            db: Async database session
            customer: Authenticated customer
            data: Order id, rating and comment

        Returns:
            ReviewResponse: Created review

        Raises:
            NotFoundError: Order missing or not the customer's
            BadRequestError: Order not delivered yet
            DuplicateError: Order already reviewed
        """
        order: Order | None = await order_repository.get_by_id(db, parse_uuid(data.order_id, "order_id"))
        if order is None or order.customer_id != customer.id:
            raise NotFoundError("Order not found")
        if order.status != "delivered":
            raise BadRequestError("You can only review delivered orders")
        if await review_repository.get_by_order(db, order.id) is not None:
            raise DuplicateError("You have already reviewed this order")

        review: Review = await review_repository.create(
            db,
            {
                "customer_id": customer.id,
                "restaurant_id": order.restaurant_id,
                "order_id": order.id,
                "rating": data.rating,
                "comment": data.comment,
            },
        )

        restaurant: Restaurant | None = await restaurant_repository.get_by_id(db, order.restaurant_id)
        if restaurant is not None:
            restaurant.update_rating(data.rating)
            owner: RestaurantUser | None = await restaurant_user_repository.get_by_id(db, restaurant.owner_id)
            if owner is not None:
                owner.update_rating(data.rating)
        await db.flush()

        logger.info("Review %s: %d stars for order %s", review.id, data.rating, order.order_number)
        return self._to_response(review)

    async def list_reviews(
        self,
        db: AsyncSession,
        restaurant_id: UUID,
        rating: int | None = None,
        status: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[ReviewResponse], int]:
        reviews, total = await review_repository.get_for_restaurant(db, restaurant_id, rating, status, page, per_page)
        return [self._to_response(r) for r in reviews], total

    async def get_review(self, db: AsyncSession, review_id: UUID, restaurant_id: UUID) -> ReviewResponse:
        return self._to_response(await self._get_for_restaurant(db, review_id, restaurant_id))

    async def respond(
        self,
        db: AsyncSession,
        review_id: UUID,
        restaurant_id: UUID,
        data: ReviewRespond,
    ) -> ReviewResponse:
        """Attach (or replace) the restaurant's reply."""
        review: Review = await self._get_for_restaurant(db, review_id, restaurant_id)
        review.response = data.response
        review.responded_at = utcnow()
        await db.flush()
        await db.refresh(review)
        return self._to_response(review)

    async def report(
        self,
        db: AsyncSession,
        review_id: UUID,
        restaurant_id: UUID,
        data: ReviewReport,
    ) -> ReviewResponse:
        review: Review = await self._get_for_restaurant(db, review_id, restaurant_id)
        if review.status == "reported":
            raise BadRequestError("Review has already been reported")
        review.status = "reported"
        review.report_reason = data.reason
        await db.flush()
        await db.refresh(review)
        logger.info("Review %s reported: %s", review.id, data.reason)
        return self._to_response(review)

    async def get_stats(self, db: AsyncSession, restaurant_id: UUID) -> ReviewStats:
        stats = await review_repository.get_stats(db, restaurant_id)
        total: int = stats["count"]
        return ReviewStats(
            average_rating=round(stats["average"], 1),
            total_reviews=total,
            distribution={name: stats["distribution"][star] for star, name in _STAR_NAMES.items()},
            response_rate=round(stats["responded"] / total * 100, 2) if total else 0.0,
        )


# Singleton instance
review_service: ReviewService = ReviewService()
