"""
FastAPI/ASGI application entrypoint.

Run with: uvicorn backend_api.api_server.app:app --host 0.0.0.0 --port 8080
Prefer `python main.py` for the bounded graceful shutdown.
"""

from backend_api.api_server.server import create_app

app = create_app()

__all__ = ["app"]
