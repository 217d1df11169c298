"""Application services - Use case orchestration.

Available services:
- LineSubmissionService: Dedupe, enqueue and maintain queued lines
- LineClaimService: Claim queued lines into history under cooldown
- HistoryQueryService: List and search claim history
- SorterSettingsService: Read and update per-team settings
"""

from src.application.services.history_query_service import HistoryQueryService
from src.application.services.line_claim_service import LineClaimService
from src.application.services.line_submission_service import LineSubmissionService
from src.application.services.sorter_settings_service import SorterSettingsService

__all__: list[str] = [
    "HistoryQueryService",
    "LineClaimService",
    "LineSubmissionService",
    "SorterSettingsService",
]
