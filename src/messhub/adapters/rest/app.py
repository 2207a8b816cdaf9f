"""
FastAPI application: REST adapter for the meal-ordering backend.

Usage:
    python run_api.py

Or directly:
    uvicorn messhub.adapters.rest.app:app --host 0.0.0.0 --port 8000 --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from messhub import __version__
from messhub.adapters.rest.dependencies import set_factory
from messhub.adapters.rest.errors import install_error_handlers
from messhub.adapters.rest.routers import auth, contacts, menu, mess, orders, owner, profile, reviews, users
from messhub.factory import ServiceFactory
from messhub.infrastructure.config import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application. Tests pass their own Settings."""
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize ServiceFactory on startup."""
        factory = ServiceFactory(settings)
        await factory.initialize()
        set_factory(factory)
        logger.info("API ready (env=%s)", settings.environment)
        yield
        # aiosqlite connections are per-operation, nothing to close

    app = FastAPI(
        title="MessHub",
        version=__version__,
        description="Meal-ordering backend for customers, mess owners and administrators.",
        lifespan=lifespan,
    )

    # Credentials (the auth cookie) cannot be combined with a "*" origin in
    # browsers, so list explicit origins in CORS_ORIGINS for cookie clients.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app, settings)

    app.include_router(auth.router)
    app.include_router(profile.router)
    app.include_router(mess.router)
    app.include_router(menu.router)
    app.include_router(orders.router)
    app.include_router(reviews.router)
    app.include_router(contacts.router)
    app.include_router(users.router)
    app.include_router(owner.router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"success": True, "status": "ok", "version": __version__}

    return app


def _default_app() -> FastAPI:
    settings = Settings.from_env()
    configure_logging(settings)
    return create_app(settings)


app = _default_app()
