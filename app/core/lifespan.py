"""
Application lifespan: builds the process-wide components and tears them down.

Anything already present on ``app.state`` (tests inject fakes) is kept as is;
only missing components are built from Settings.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from firebase_admin import exceptions as firebase_exceptions
from google.auth import exceptions as google_auth_exceptions
from sqlalchemy.exc import SQLAlchemyError

from app.core.identity import FirebaseIdentityProvider
from app.core.services.membership_service import MembershipService
from app.core.services.scheduler_service import create_scheduler, shutdown_scheduler, start_scheduler
from app.database.session import Database
from app.payments import get_payment_provider
from app.utils.firebase_config import init_firebase_app

logger = logging.getLogger(__name__)


def _build_identity(settings):
    try:
        return FirebaseIdentityProvider(init_firebase_app(settings.firebase_credentials))
    except (ValueError, firebase_exceptions.FirebaseError, google_auth_exceptions.GoogleAuthError) as e:
        logger.warning(f"Firebase Auth not available: {e}. Authenticated endpoints will answer 503.")
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    logger.info("AIS Trueque API starting...")

    # Database
    if getattr(app.state, "database", None) is None:
        app.state.database = Database.from_settings(settings)
    database: Database = app.state.database
    try:
        if settings.auto_create_schema:
            await database.create_all()
            logger.info("Database schema created")
        await database.ping()
        logger.info("Database connection OK")
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database connection failed: {e}")

    # Identity
    if getattr(app.state, "identity", None) is None:
        app.state.identity = _build_identity(settings)

    # Payments
    if getattr(app.state, "payment_provider", None) is None:
        app.state.payment_provider = get_payment_provider(settings)
    logger.info(f"Payment provider: {app.state.payment_provider.get_name()}")

    # Scheduler
    scheduler = None
    if settings.membership_sweep_enabled:
        membership = MembershipService(database, app.state.payment_provider)
        scheduler = create_scheduler(membership, settings.membership_sweep_minutes)
        start_scheduler(scheduler)
    app.state.scheduler = scheduler

    logger.info("API ready")
    yield

    logger.info("AIS Trueque API shutting down...")
    if scheduler is not None:
        shutdown_scheduler(scheduler)
    await database.dispose()
