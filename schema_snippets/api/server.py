"""FastAPI application factory for the schema snippets service."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from ..mcpserver import mcp
from .route import router
from .service import ApiSettings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the service logger once."""
    logger = logging.getLogger("schema_snippets")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger


def create_app(settings: ApiSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    # setup mcp
    mcp_app = mcp.http_app("/")

    settings = settings or ApiSettings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Schema Snippet API",
        version="0.1.0",
        lifespan=mcp_app.lifespan,
    )
    app.state.settings = settings
    app.include_router(router)

    # mount mcp
    app.mount("/mcp", mcp_app)

    return app


app = create_app()


__all__ = ["app", "configure_logging", "create_app"]
