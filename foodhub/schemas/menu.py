"""Menu request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

_SPICE_PATTERN = r"^(mild|medium|hot|very_hot)$"


class MenuCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: str | None = Field(None, max_length=200)
    is_active: bool = True
    sort_order: int = 0


class MenuCategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = Field(None, max_length=200)
    is_active: bool | None = None
    sort_order: int | None = None


class MenuCategoryResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    is_active: bool
    sort_order: int
    item_count: int = 0
    created_at: datetime


class MenuItemCreate(BaseModel):
    """Menu item creation request.

    Attributes:
        category_id: One of the restaurant's own categories
        name / description / price: Listing data (price >= 0)
        spice_level: mild | medium | hot | very_hot
        preparation_time: Minutes
    """

    category_id: str
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    price: float = Field(..., ge=0)
    images: list[str] = []
    tags: list[str] = []
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_gluten_free: bool = False
    spice_level: str = Field("mild", pattern=_SPICE_PATTERN)
    preparation_time: int = Field(15, ge=1, le=240)
    calories: int | None = Field(None, ge=0)
    is_available: bool = True
    sort_order: int = 0


class MenuItemUpdate(BaseModel):
    category_id: str | None = None
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    price: float | None = Field(None, ge=0)
    images: list[str] | None = None
    tags: list[str] | None = None
    is_vegetarian: bool | None = None
    is_vegan: bool | None = None
    is_gluten_free: bool | None = None
    spice_level: str | None = Field(None, pattern=_SPICE_PATTERN)
    preparation_time: int | None = Field(None, ge=1, le=240)
    calories: int | None = Field(None, ge=0)
    is_available: bool | None = None
    sort_order: int | None = None


class MenuItemResponse(BaseModel):
    id: str
    category_id: str
    category: str | None = None
    name: str
    description: str | None = None
    price: float
    image: str | None = None
    images: list[str] = []
    tags: list[str] = []
    is_vegetarian: bool
    is_vegan: bool
    is_gluten_free: bool
    spice_level: str
    preparation_time: int
    calories: int | None = None
    is_available: bool
    sort_order: int
    order_count: int
    created_at: datetime
