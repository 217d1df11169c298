"""Correlation id helpers for the API layer.

The middleware imports these from here instead of from
``src.infrastructure.observability``.
"""

from src.infrastructure.observability.correlation import (
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)

__all__ = ["generate_correlation_id", "get_correlation_id", "set_correlation_id"]
