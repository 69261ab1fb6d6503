"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Every journey definition loaded, with its controllers built once
  - Signed cookie session carrying only a session id
  - Server-side journey sessions (answers and flash messages live there)
  - CORS middleware
  - Global exception handlers (SDK ValueError → 404/409/400)
  - Portal routes at each journey's ``route`` and manage routes at its
    ``manage_route``
  - A ``/health`` endpoint for readiness checks

The ``cli()`` function is the ``formflow-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from starlette.middleware.sessions import SessionMiddleware

from formflow_db.engine import dispose_engine, get_engine
from formflow_journeys.interfaces import LoggingNotifier
from formflow_journeys.service import SubmissionService
from formflow_journeys.store import JourneyStore

from formflow_server.config import ServerSettings, load_settings
from formflow_server.dependencies import build_handlers
from formflow_server.errors import (
    generic_error_handler,
    key_error_handler,
    value_error_handler,
)
from formflow_server.routes import register_routes
from formflow_server.sessions import JourneySessionMiddleware, SessionStore

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan: runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log the served journeys at startup; dispose the engine's pool on shutdown."""
    logger.info("Serving journeys %s", ", ".join(sorted(app.state.journeys)))

    yield

    # --- Shutdown ---
    await dispose_engine()
    logger.info("Database engine disposed")


# ------------------------------------------------------------------
# Journeys
# ------------------------------------------------------------------

def load_journeys(app: FastAPI, settings: ServerSettings) -> JourneyStore:
    """Load definitions and stash one ``JourneyHandlers`` per journey on ``app.state``.

    Routes depend on the loaded definitions, so this runs in the factory
    rather than in the lifespan handler.
    """
    store = JourneyStore(journey_dir=settings.journey_dir)
    store.load()

    notifier = LoggingNotifier()
    app.state.store = store
    app.state.journeys = {
        definition.id: build_handlers(definition, SubmissionService(definition, notifier=notifier))
        for definition in store.list_journeys()
    }
    return store


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = load_settings()

    # --- Configure logging ---
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Formflow Server",
        description="Form journey portal and submission management",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store settings so dependencies can read them
    app.state.settings = settings
    app.state.sessions = SessionStore(max_age=settings.session_store_ttl)
    store = load_journeys(app, settings)

    # --- Journey sessions (inner: runs after the cookie is decoded) ---
    app.add_middleware(JourneySessionMiddleware)

    # --- Cookie session: only the session id ---
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie=settings.session_cookie_name,
        max_age=settings.session_max_age or None,
        same_site="lax",
        https_only=settings.session_https_only,
    )

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Exception handlers ---
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(KeyError, key_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # --- Health check ---
    @app.get("/health")
    async def health() -> dict:
        """Readiness check: verifies DB connectivity."""
        try:
            async with get_engine().connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ok"}
        except Exception as exc:
            logger.error("Health check failed: %s", exc)
            return {"status": "error"}

    register_routes(app, store)

    return app


# ------------------------------------------------------------------
# Module-level ASGI export (for uvicorn formflow_server.app:app)
# ------------------------------------------------------------------
app = create_app()


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``formflow-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "formflow_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
