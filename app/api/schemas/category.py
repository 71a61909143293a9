"""Category taxonomy schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from app.api.schemas.common import ApiModel
from app.database.models.category import Category

CategoryTypeValue = Literal["article", "service"]
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=50, pattern=SLUG_PATTERN)
    icon: str = Field("", max_length=20)
    color: str = Field("", max_length=50)
    type: CategoryTypeValue
    order: Optional[int] = Field(None, ge=0)
    is_active: bool = True


class CategoryUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=50, pattern=SLUG_PATTERN)
    icon: Optional[str] = Field(None, max_length=20)
    color: Optional[str] = Field(None, max_length=50)
    type: Optional[CategoryTypeValue] = None
    order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class CategoryReorder(ApiModel):
    category_ids: List[int] = Field(..., min_length=1)


class CategoryOut(ApiModel):
    id: int
    name: str
    slug: str
    icon: str
    color: str
    type: str
    order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, category: Category) -> "CategoryOut":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            icon=category.icon,
            color=category.color,
            type=category.type,
            order=category.sort_order,
            is_active=category.is_active,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )
