"""Rating schemas."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from app.api.schemas.common import ApiModel
from app.database.models.rating import Rating

TargetTypeValue = Literal["user", "service"]


class RatingCreate(ApiModel):
    target_id: str = Field(..., min_length=1, max_length=128)
    target_type: TargetTypeValue
    score: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)
    recommend: bool = True

    @field_validator("comment")
    @classmethod
    def blank_comment_is_none(cls, comment):
        return comment or None


class RatingOut(ApiModel):
    id: int
    target_id: str
    target_type: str
    reviewer_id: str
    reviewer_name: Optional[str] = None
    score: int
    comment: Optional[str] = None
    recommend: bool
    created_at: datetime

    @classmethod
    def from_model(cls, rating: Rating) -> "RatingOut":
        return cls(
            id=rating.id,
            target_id=rating.target_id,
            target_type=rating.target_type,
            reviewer_id=rating.reviewer_id,
            reviewer_name=rating.reviewer_name,
            score=rating.score,
            comment=rating.comment,
            recommend=rating.recommend,
            created_at=rating.created_at,
        )
