"""Restaurant Review Router - reviews of the caller's restaurant."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_owner_listing
from foodhub.database import get_db
from foodhub.models.restaurant import Restaurant
from foodhub.schemas.review import ReviewReport, ReviewRespond, ReviewResponse, ReviewStats
from foodhub.services.review_service import review_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()


@router.get("", response_model=Page)
async def list_reviews(
    db: Annotated[AsyncSession, Depends(get_db)],
    listing: Annotated[Restaurant, Depends(get_owner_listing)],
    rating: Annotated[int | None, Query(ge=1, le=5)] = None,
    status: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
) -> Page:
    items, total = await review_service.list_reviews(db, listing.id, rating, status, page, per_page)
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/stats", response_model=ReviewStats)
async def get_review_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    listing: Annotated[Restaurant, Depends(get_owner_listing)],
) -> ReviewStats:
    return await review_service.get_stats(db, listing.id)


@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(
    review_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    listing: Annotated[Restaurant, Depends(get_owner_listing)],
) -> ReviewResponse:
    return await review_service.get_review(db, review_id, listing.id)


@router.post("/{review_id}/respond", response_model=ReviewResponse)
async def respond_to_review(
    review_id: UUID,
    data: ReviewRespond,
    db: Annotated[AsyncSession, Depends(get_db)],
    listing: Annotated[Restaurant, Depends(get_owner_listing)],
) -> ReviewResponse:
    result: ReviewResponse = await review_service.respond(db, review_id, listing.id, data)
    await db.commit()
    return result


@router.post("/{review_id}/report", response_model=ReviewResponse)
async def report_review(
    review_id: UUID,
    data: ReviewReport,
    db: Annotated[AsyncSession, Depends(get_db)],
    listing: Annotated[Restaurant, Depends(get_owner_listing)],
) -> ReviewResponse:
    result: ReviewResponse = await review_service.report(db, review_id, listing.id, data)
    await db.commit()
    return result
