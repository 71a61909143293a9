"""UserDeletion model - progress record for the cascading user delete."""

from typing import List, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database.models.model_base import JSONType, TimestampMixin
from app.database.session import Base
from app.utils.enums import DeletionStatus


class UserDeletion(TimestampMixin, Base):
    __tablename__ = "user_deletions"

    # No FK: the record outlives the user row it describes.
    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    requested_by: Mapped[Optional[str]] = mapped_column(String(128))
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DeletionStatus.IN_PROGRESS,
    )
    completed_steps: Mapped[List[str]] = mapped_column(JSONType, default=list, nullable=False)
    last_error: Mapped[Optional[str]] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<UserDeletion user_id={self.user_id} status={self.status}>"
