"""
Configuration management for the Backend API server.

Loads settings from environment variables with defaults. Exposes a single
source of truth for the listener port and timeouts.
"""

from backend_api.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
