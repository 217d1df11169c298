"""
Domain layer - Pure business logic for the line sorter.

This layer contains:
- Domain models (queued lines, history entries, settings, identities)
- Domain services (line deduplication)
- Domain errors

CRITICAL: This layer must NOT import from application, infrastructure, or api.
"""

from src.domain.exceptions import SorterError

__all__: list[str] = ["SorterError"]
