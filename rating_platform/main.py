"""
Application entry point.
Run with:  uvicorn rating_platform.main:app --reload

⚠️  DEVELOPMENT NOTE:
    A default admin user is seeded on startup while SEED_ADMIN is true
    (see rating_platform/db/seeder.py). Turn it off in production.
"""
import logging
import sqlite3
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rating_platform.core.logging_config import configure_logging
from rating_platform.core.config import settings
from rating_platform.core.exceptions import InternalError
from rating_platform.core.session_store import (
    InMemorySessionStore,
    SessionStore,
    SessionSweeper,
)
from rating_platform.api.v1.router import api_router
from rating_platform.db.database import init_db
from rating_platform.db.seeder import seed_admin

configure_logging()


def create_app(session_store: Optional[SessionStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    The session store lives exactly as long as the app: it is built here,
    swept in the background after startup and cleared on shutdown.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting FastAPI application setup")
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Session-authenticated API where raters score stores, store "
            "owners read their ratings and administrators manage both."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    store = session_store if session_store is not None else InMemorySessionStore()
    sweeper = SessionSweeper(store, settings.SESSION_SWEEP_INTERVAL_SECONDS)
    app.state.session_store = store
    app.state.session_sweeper = sweeper

    # ── Middleware ──────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error handling ──────────────────────────────────────────────────────
    @app.exception_handler(sqlite3.Error)
    async def on_database_error(request: Request, exc: sqlite3.Error) -> JSONResponse:
        """Log persistence failures and hide their details from the caller."""
        logger.error(
            "Unhandled database error on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        error = InternalError()
        return JSONResponse(status_code=error.status_code, content={"detail": error.detail})

    # ── Routers ─────────────────────────────────────────────────────────────
    app.include_router(api_router)

    # ── Startup / shutdown events ───────────────────────────────────────────
    @app.on_event("startup")
    def on_startup() -> None:
        logger.info("Initializing database and session sweeper")
        init_db()
        if settings.SEED_ADMIN:
            seed_admin()
        sweeper.start()

    @app.on_event("shutdown")
    def on_shutdown() -> None:
        logger.info("Stopping session sweeper and clearing sessions")
        sweeper.stop()
        store.clear()

    return app


app = create_app()
