from datetime import datetime

from pydantic import Field

from app.core.response.base_model import CustomBaseModel

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CategoryMin(CustomBaseModel):
    id: int
    category_name: str
    code: str
    color_hex: str | None = None


class CategoryBase(CustomBaseModel):
    category_name: str = Field(..., min_length=1, max_length=100)
    code: str | None = Field(None, min_length=1, max_length=20)
    description: str | None = Field(None, max_length=500)
    color_hex: str | None = Field(None, pattern=COLOR_PATTERN)


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CustomBaseModel):
    category_name: str | None = Field(None, min_length=1, max_length=100)
    code: str | None = Field(None, min_length=1, max_length=20)
    description: str | None = Field(None, max_length=500)
    color_hex: str | None = Field(None, pattern=COLOR_PATTERN)


class CategoryPublic(CustomBaseModel):
    id: int
    category_name: str
    code: str
    description: str | None = None
    color_hex: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CategoryWithStats(CategoryPublic):
    event_count: int = 0
