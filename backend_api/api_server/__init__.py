"""
API server package — HTTP interface and server lifecycle.

Exposes /health and / through a FastAPI app wrapped in recovery and request
logging middleware, served by uvicorn with graceful shutdown.
"""
