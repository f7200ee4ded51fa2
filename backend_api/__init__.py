"""
Backend API — minimal HTTP service with health and welcome endpoints.

Runs a FastAPI app under uvicorn with request logging, fault recovery,
and graceful shutdown on SIGINT/SIGTERM.
"""

__version__ = "0.1.0"
