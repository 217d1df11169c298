"""Line sorter API dependencies.

Dependency injection setup for the queue, claim, history and settings
services. Storage adapters come from ``src.bootstrap.line_sorter``.

Tests replace any getter through ``app.dependency_overrides`` or call
``reset_line_sorter_dependencies`` between cases.
"""

from __future__ import annotations

from src.application.services.history_query_service import HistoryQueryService
from src.application.services.line_claim_service import LineClaimService
from src.application.services.line_submission_service import LineSubmissionService
from src.application.services.sorter_settings_service import SorterSettingsService
from src.bootstrap.line_sorter import (
    get_claim_transfer,
    get_history_ledger,
    get_queue_store,
    get_settings_repository,
    get_sorter_config,
    reset_line_sorter_bootstrap,
)

_line_submission_service: LineSubmissionService | None = None
_line_claim_service: LineClaimService | None = None
_history_query_service: HistoryQueryService | None = None
_sorter_settings_service: SorterSettingsService | None = None


def get_sorter_settings_service() -> SorterSettingsService:
    """Get sorter settings service instance."""
    global _sorter_settings_service
    if _sorter_settings_service is None:
        _sorter_settings_service = SorterSettingsService(
            repository=get_settings_repository(),
        )
    return _sorter_settings_service


def get_line_submission_service() -> LineSubmissionService:
    """Get line submission service instance."""
    global _line_submission_service
    if _line_submission_service is None:
        _line_submission_service = LineSubmissionService(
            queue_store=get_queue_store(),
            history_ledger=get_history_ledger(),
        )
    return _line_submission_service


def get_line_claim_service() -> LineClaimService:
    """Get line claim service instance.

    Shares the settings service so claims read the same settings the
    settings endpoints write.
    """
    global _line_claim_service
    if _line_claim_service is None:
        _line_claim_service = LineClaimService(
            queue_store=get_queue_store(),
            claim_transfer=get_claim_transfer(),
            settings_service=get_sorter_settings_service(),
            config=get_sorter_config(),
        )
    return _line_claim_service


def get_history_query_service() -> HistoryQueryService:
    """Get history query service instance."""
    global _history_query_service
    if _history_query_service is None:
        _history_query_service = HistoryQueryService(
            history_ledger=get_history_ledger(),
            config=get_sorter_config(),
        )
    return _history_query_service


# Testing helper functions


def reset_line_sorter_dependencies() -> None:
    """Reset all singleton instances, storage included, for testing."""
    global _line_submission_service, _line_claim_service
    global _history_query_service, _sorter_settings_service
    _line_submission_service = None
    _line_claim_service = None
    _history_query_service = None
    _sorter_settings_service = None
    reset_line_sorter_bootstrap()


__all__ = [
    "get_history_query_service",
    "get_line_claim_service",
    "get_line_submission_service",
    "get_sorter_config",
    "get_sorter_settings_service",
    "reset_line_sorter_dependencies",
]
