"""Article listing schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from app.api.schemas.common import ApiModel
from app.database.models.article import Article

MIN_IMAGES = 1
MAX_IMAGES = 5

ConditionValue = Literal["new", "like_new", "good", "fair"]
StatusValue = Literal["active", "reserved", "sold", "inactive"]


def check_images(images: Optional[List[str]]) -> Optional[List[str]]:
    if images is None:
        return images
    images = [url.strip() for url in images if url and url.strip()]
    if len(images) < MIN_IMAGES:
        raise ValueError("At least one image is required")
    if len(images) > MAX_IMAGES:
        raise ValueError(f"At most {MAX_IMAGES} images are allowed")
    return images


class ArticleMetadata(ApiModel):
    grade: Optional[str] = Field(None, max_length=50)
    size: Optional[str] = Field(None, max_length=20)
    brand: Optional[str] = Field(None, max_length=50)


class ArticleCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=120)
    description: str = Field(..., min_length=1, max_length=2000)
    category: str = Field(..., min_length=1, max_length=50)
    subcategory: Optional[str] = Field(None, max_length=50)
    condition: ConditionValue
    price: int = Field(..., gt=0)
    price_negotiable: bool = False
    images: List[str]
    metadata: ArticleMetadata = Field(default_factory=ArticleMetadata)

    @field_validator("images")
    @classmethod
    def validate_images(cls, images):
        return check_images(images)


class ArticleUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    subcategory: Optional[str] = Field(None, max_length=50)
    condition: Optional[ConditionValue] = None
    price: Optional[int] = Field(None, gt=0)
    price_negotiable: Optional[bool] = None
    images: Optional[List[str]] = None
    metadata: Optional[ArticleMetadata] = None

    @field_validator("images")
    @classmethod
    def validate_images(cls, images):
        return check_images(images)


class ArticleStatusUpdate(ApiModel):
    status: StatusValue


class ArticleOut(ApiModel):
    id: int
    seller_id: str
    title: str
    description: str
    category: str
    subcategory: Optional[str] = None
    condition: str
    price: int
    price_negotiable: bool
    metadata: dict
    images: List[str]
    status: str
    views: int
    favorites: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, article: Article) -> "ArticleOut":
        return cls(
            id=article.id,
            seller_id=article.seller_id,
            title=article.title,
            description=article.description,
            category=article.category,
            subcategory=article.subcategory,
            condition=article.condition,
            price=article.price,
            price_negotiable=article.price_negotiable,
            metadata=article.extra_metadata or {},
            images=list(article.images or []),
            status=article.status,
            views=article.views,
            favorites=article.favorites,
            created_at=article.created_at,
            updated_at=article.updated_at,
        )
