"""Rating model - one review per (reviewer, target, target type)."""

from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database.models.model_base import SqlAlchemyModel


class Rating(SqlAlchemyModel):
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint(
            "reviewer_id",
            "target_id",
            "target_type",
            name="uq_ratings_reviewer_target",
        ),
        CheckConstraint("score BETWEEN 1 AND 5", name="ck_ratings_score_range"),
    )

    target_type: Mapped[str] = mapped_column(String(20), nullable=False)  # user | service
    target_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    target_owner_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    reviewer_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    reviewer_name: Mapped[Optional[str]] = mapped_column(String(255))

    score: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text)
    recommend: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Rating id={self.id} {self.target_type}:{self.target_id} score={self.score}>"
