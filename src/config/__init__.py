"""Configuration module for Line Sorter.

Available Configurations:
- SorterServiceConfig: storage backend, claim policy enforcement, history paging
"""

from src.config.sorter_config import (
    DEFAULT_SORTER_CONFIG,
    TEST_SORTER_CONFIG,
    SorterServiceConfig,
)

__all__ = [
    "SorterServiceConfig",
    "DEFAULT_SORTER_CONFIG",
    "TEST_SORTER_CONFIG",
]
