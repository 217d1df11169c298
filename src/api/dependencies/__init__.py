"""API dependencies for dependency injection."""

from src.api.dependencies.line_sorter import (
    get_history_query_service,
    get_line_claim_service,
    get_line_submission_service,
    get_sorter_config,
    get_sorter_settings_service,
    reset_line_sorter_dependencies,
)

__all__: list[str] = [
    "get_history_query_service",
    "get_line_claim_service",
    "get_line_submission_service",
    "get_sorter_config",
    "get_sorter_settings_service",
    "reset_line_sorter_dependencies",
]
