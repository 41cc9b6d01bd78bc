"""Schemas shared across domains."""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Generic acknowledgement body."""

    success: bool = True
    message: str


class BulkStatusResult(BaseModel):
    """Outcome of a bulk status update.

    Attributes:
        matched_count: Records whose id was in the request
        modified_count: Records whose status actually changed
    """

    matched_count: int
    modified_count: int


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
