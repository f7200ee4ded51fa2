"""
FastAPI app factory.

Builds the app with the route table and the middleware chain
(Recovery → RequestLogging → router). Settings and logger are passed in
explicitly; both default to the process-wide ones.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from starlette.middleware import Middleware

from backend_api import __version__
from backend_api.api_logging import get_logger
from backend_api.api_server.middleware import RecoveryMiddleware, RequestLoggingMiddleware
from backend_api.api_server.routes import router
from backend_api.config import Settings, get_settings


def create_app(settings: Settings | None = None, logger: Any = None) -> FastAPI:
    """
    Return a FastAPI app serving /health and /.

    Generated docs and trailing-slash redirects are disabled so that every
    path other than the two routes is a 404.
    """
    settings = settings or get_settings()
    logger = logger or get_logger("http")

    app = FastAPI(
        title="Backend API",
        description="Health and welcome endpoints.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
        # First entry is outermost
        middleware=[
            Middleware(RecoveryMiddleware, logger=logger),
            Middleware(RequestLoggingMiddleware, logger=logger),
        ],
    )
    app.state.settings = settings
    app.include_router(router)
    return app
