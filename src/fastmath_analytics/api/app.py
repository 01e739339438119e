"""FastAPI application factory.

Read-only HTTP layer over the session store:
- Validates inputs, scans the store through aggregation functions
- Returns report payloads for the admin dashboard
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from fastmath_analytics.core.config import Settings
from fastmath_analytics.store import SessionStore, StoreError, build_store

logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    """Dependency to get runtime settings.

    Raises:
        HTTPException: 500 if the environment holds invalid settings.
    """
    try:
        return Settings.from_env()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        raise HTTPException(status_code=500, detail="Invalid server configuration") from e


@lru_cache(maxsize=4)
def _store_for(settings: Settings) -> SessionStore:
    return build_store(settings)


def get_session_store(settings: Settings = Depends(get_settings)) -> SessionStore:
    """Dependency to get the configured session store.

    Stores are cached per settings value.

    Raises:
        HTTPException: 502 if the store cannot be opened.
    """
    try:
        return _store_for(settings)
    except StoreError as e:
        logger.error(f"Session store unavailable: {e}")
        raise HTTPException(status_code=502, detail="Session store unavailable") from e


def create_app() -> FastAPI:
    """Create FastAPI application.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="FastMath Analytics API",
        description="Session analytics over FastMath practice sessions",
        version="0.1.0",
    )

    # Add CORS middleware for the admin dashboard
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",  # frontend dev server
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Include routes
    from fastmath_analytics.api.routes import session_metrics

    app.include_router(session_metrics.router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# Default app instance
app = create_app()
