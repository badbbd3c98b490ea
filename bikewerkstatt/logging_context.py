"""Session ID logging context for tracing one booking run across modules.

Provides a session_id-aware logger that attaches a correlation ID to every
log message, so a single customer's walk through the booking wizard (or an
admin's dashboard session) can be followed in the logs.

Usage:
    from bikewerkstatt.logging_context import get_session_logger, set_session_id

    set_session_id("WIZ-abc123")
    logger = get_session_logger(__name__)
    logger.info("Date selected")  # record.session_id == "WIZ-abc123"
"""

import logging
import uuid
from contextvars import ContextVar

_session_id: ContextVar[str] = ContextVar("session_id", default="NO_SESSION")


def new_session_id(prefix: str = "WIZ") -> str:
    """Generate a short correlation ID such as ``WIZ-1a2b3c``."""
    return f"{prefix}-{uuid.uuid4().hex[:6]}"


def set_session_id(session_id: str) -> None:
    """Set the correlation ID for the current context."""
    _session_id.set(session_id)


def get_session_id() -> str:
    """Retrieve the current correlation ID."""
    return _session_id.get()


class SessionIdFilter(logging.Filter):
    """Injects session_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def get_session_logger(name: str) -> logging.Logger:
    """Return a logger with the SessionIdFilter attached.

    The filter adds ``session_id`` to each record so formatters can
    include ``%(session_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, SessionIdFilter) for f in logger.filters):
        logger.addFilter(SessionIdFilter())
    return logger


def add_session_filter(handler: logging.Handler) -> None:
    """Attach a SessionIdFilter to a handler.

    Handlers whose format uses ``%(session_id)s`` need this so that records
    from loggers without the filter still format.
    """
    if not any(isinstance(f, SessionIdFilter) for f in handler.filters):
        handler.addFilter(SessionIdFilter())
