"""Category model - admin-managed taxonomy for articles and services."""

from sqlalchemy import Boolean, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database.models.model_base import SqlAlchemyModel


class Category(SqlAlchemyModel):
    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("type", "slug", name="uq_categories_type_slug"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), nullable=False)
    icon: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    color: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)  # article | service
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Category id={self.id} type={self.type} slug={self.slug}>"
