"""
Routes: exact-path dispatch for /health and /.

Any other path falls through to the framework's 404. Handlers accept every
standard HTTP method (ROUTE_METHODS), matching a plain path-to-handler table.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]
WELCOME_MESSAGE = "Welcome to the API"

router = APIRouter()


class HealthResponse(BaseModel):
    """/health response body."""

    status: str = Field("ok", description="Liveness status")


@router.api_route("/health", methods=ROUTE_METHODS, response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness probe: API is up."""
    return HealthResponse(status="ok")


@router.api_route("/", methods=ROUTE_METHODS, response_class=PlainTextResponse)
def home() -> str:
    return WELCOME_MESSAGE
