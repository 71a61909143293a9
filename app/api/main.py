"""
AIS Trueque - FastAPI Application

Membership-gated marketplace for a school community: articles, services,
ratings and the annual membership paid through Mercado Pago.

Usage:
    uvicorn app.api.main:app --reload --host 0.0.0.0 --port 8000

Docs:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

from dotenv import load_dotenv

load_dotenv()  # load .env from current working directory (project root)

import logging
import re
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.api.routers import admin, articles, auth, categories, payments, ratings, services, webhooks
from app.core.config import Settings
from app.core.exceptions import register_exception_handlers
from app.core.identity import IdentityProvider
from app.core.lifespan import lifespan
from app.core.logging import setup_logger
from app.core.middleware import request_logger
from app.core.services.scheduler_service import get_scheduler_jobs
from app.payments.base import PaymentProvider

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def create_app(
    settings: Optional[Settings] = None,
    identity: Optional[IdentityProvider] = None,
    payment_provider: Optional[PaymentProvider] = None,
) -> FastAPI:
    """
    Build the application. Components passed in here are used as-is;
    the rest are created from ``settings`` when the lifespan starts.
    """
    settings = settings or Settings.from_env()
    setup_logger(getattr(logging, settings.log_level, logging.INFO))

    app = FastAPI(
        title="AIS Trueque API",
        description="Marketplace for the school community: articles, services and ratings.",
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.database = None
    app.state.identity = identity
    app.state.payment_provider = payment_provider

    # CORS - listed origins plus any origin ending with CORS_ORIGIN_SUFFIX (preview deploys)
    origin_regex = None
    if settings.cors_origin_suffix:
        origin_regex = r"https://.*" + re.escape(settings.cors_origin_suffix)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )
    app.middleware("http")(request_logger)

    register_exception_handlers(app)

    @app.get("/", tags=["Health"])
    async def root():
        return {
            "name": "AIS Trueque API",
            "version": API_VERSION,
            "status": "running",
            "docs": "/docs",
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        state = request.app.state
        health = {"status": "healthy", "components": {"api": "ok"}}
        try:
            await state.database.ping()
            health["components"]["database"] = "ok"
        except (SQLAlchemyError, OSError) as e:
            health["status"] = "degraded"
            health["components"]["database"] = f"error: {str(e)}"
        health["components"]["auth"] = "ok" if state.identity is not None else "unavailable"
        if state.identity is None:
            health["status"] = "degraded"
        health["components"]["payments"] = state.payment_provider.get_name()
        scheduler = getattr(state, "scheduler", None)
        health["components"]["scheduler"] = get_scheduler_jobs(scheduler) if scheduler is not None else "disabled"
        return health

    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
    app.include_router(webhooks.router, prefix="/api/payments", tags=["Webhooks"])
    app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])
    app.include_router(articles.router, prefix="/api/articles", tags=["Articles"])
    app.include_router(services.router, prefix="/api/services", tags=["Services"])
    app.include_router(ratings.router, prefix="/api/ratings", tags=["Ratings"])
    app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.api.main:app", host="0.0.0.0", port=8000, reload=True)
