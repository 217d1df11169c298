"""Domain services for the line sorter.

Available services:
- analyze_submission / dedupe_lines: Submission deduplication
"""

from src.domain.services.line_dedup import (
    GROUPING_KEY_TOKENS,
    DedupOutcome,
    analyze_submission,
    dedupe_lines,
    grouping_key,
    normalize_line,
)

__all__: list[str] = [
    "GROUPING_KEY_TOKENS",
    "DedupOutcome",
    "analyze_submission",
    "dedupe_lines",
    "grouping_key",
    "normalize_line",
]
