"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

from src.config.sorter_config import SorterServiceConfig
from src.infrastructure.observability import configure_structlog


def configure_logging(config: SorterServiceConfig) -> None:
    """Configure structlog for the service's environment."""
    configure_structlog(environment=config.environment)


__all__ = ["configure_logging"]
