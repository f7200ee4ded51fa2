"""
Application-level exceptions.

Both subclasses are fatal for the process: the entrypoint logs them and
exits with a non-zero code.
"""


class ServerError(Exception):
    """Base class for server lifecycle failures."""


class BindError(ServerError):
    """Listener could not be bound (port in use, invalid or out of range)."""


class ShutdownTimeoutError(ServerError):
    """In-flight requests did not finish within the shutdown timeout."""
