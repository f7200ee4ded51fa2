"""
Main entrypoint: FastAPI server under uvicorn with bounded graceful shutdown.

Binds 0.0.0.0:$PORT (default 8080), serves /health and /, and on SIGINT/SIGTERM
stops accepting connections and waits up to 30s for in-flight requests.
Exit code 0 on a clean stop, 1 on bind failure or forced shutdown.

Env: PORT, LOG_LEVEL, LOG_FORMAT. Logging is reconfigured at LOG_LEVEL by
run_server before the first line is written.

App only (no bounded drain): uvicorn backend_api.api_server.app:app --host 0.0.0.0 --port 8080
"""

import sys


def main() -> int:
    """Load settings from env and run the server until shutdown."""
    from backend_api.api_server.lifecycle import run_server
    from backend_api.config import get_settings

    return run_server(get_settings())


if __name__ == "__main__":
    sys.exit(main())
