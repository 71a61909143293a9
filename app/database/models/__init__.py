"""Database models package - import all models so Alembic can discover them."""

from app.database.models.model_base import SqlAlchemyModel, TimestampMixin
from app.database.models.user import User
from app.database.models.article import Article
from app.database.models.service_provider import ServiceProvider
from app.database.models.category import Category
from app.database.models.rating import Rating
from app.database.models.payment import ProcessedPayment, ReconciliationFailure
from app.database.models.user_deletion import UserDeletion

__all__ = [
    "SqlAlchemyModel",
    "TimestampMixin",
    "User",
    "Article",
    "ServiceProvider",
    "Category",
    "Rating",
    "ProcessedPayment",
    "ReconciliationFailure",
    "UserDeletion",
]
