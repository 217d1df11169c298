"""Request correlation ids carried in a context variable.

The LoggingMiddleware sets the id at request start; every log entry
emitted while handling that request picks it up through
``correlation_id_processor``. Context variables follow the request
across awaits, so concurrent requests never share an id.
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Return a fresh UUID4 correlation id."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Return the current request's correlation id, or "" outside a request."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation id to the current context.

    Args:
        correlation_id: Id taken from the request header or generated.
    """
    _correlation_id.set(correlation_id)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding ``correlation_id`` when one is set.

    Args:
        logger: Unused, required by structlog.
        method_name: Unused, required by structlog.
        event_dict: Event being rendered.

    Returns:
        The event dictionary.
    """
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
