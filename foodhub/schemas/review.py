"""Review request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    order_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = Field(None, max_length=1000)


class ReviewRespond(BaseModel):
    response: str = Field(..., min_length=1, max_length=1000)


class ReviewReport(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class ReviewResponse(BaseModel):
    id: str
    customer_id: str
    restaurant_id: str
    order_id: str
    rating: int
    comment: str | None = None
    response: str | None = None
    responded_at: datetime | None = None
    status: str
    report_reason: str | None = None
    created_at: datetime


class ReviewStats(BaseModel):
    """Rating summary for one restaurant.

    Attributes:
        average_rating: Mean rating, 1 decimal
        total_reviews: Review count
        distribution: {five, four, three, two, one}
        response_rate: Percentage of reviews with a restaurant response
    """

    average_rating: float
    total_reviews: int
    distribution: dict[str, int]
    response_rate: float
