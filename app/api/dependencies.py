"""Request-scoped accessors for the components built in the lifespan."""

from fastapi import Depends, Request

from app.core.auth import get_identity_provider
from app.core.identity import IdentityProvider
from app.core.services.membership_service import MembershipService
from app.core.services.user_deletion_service import UserDeletionService
from app.database.session import Database, get_database
from app.payments.base import PaymentProvider


def get_provider(request: Request) -> PaymentProvider:
    return request.app.state.payment_provider


def get_membership_service(
    database: Database = Depends(get_database),
    provider: PaymentProvider = Depends(get_provider),
) -> MembershipService:
    return MembershipService(database, provider)


def get_user_deletion_service(
    database: Database = Depends(get_database),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> UserDeletionService:
    return UserDeletionService(database, identity)
