"""Line deduplication domain service.

This module decides which submitted lines may enter a team's queue.
It is a pure function of its inputs: callers pass the live queue and
history contents explicitly, nothing is read from storage here.

Matching policy:
- A line is normalized by trimming surrounding whitespace and case-folding.
- Its grouping key is the first 15 whitespace-delimited tokens of the
  normalized line joined by single spaces. Two lines with the same key
  are duplicates even if they diverge after the 15th token.
- Against the queue and history, the FULL normalized line must match
  exactly; the grouping key is only used within the submitted batch.
- The first accepted line of each key wins and is returned verbatim
  (original casing and whitespace). A line rejected because it is
  already queued or claimed does not reserve its key.
- Blank lines are ignored.

Invariant: dedupe_lines(dedupe_lines(L, Q, H), Q, H) == dedupe_lines(L, Q, H).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

GROUPING_KEY_TOKENS = 15


def normalize_line(line: str) -> str:
    """Trim surrounding whitespace and case-fold a line.

    Args:
        line: Raw line text.

    Returns:
        Normalized line used for exact comparison.
    """
    return line.strip().casefold()


def grouping_key(line: str) -> str:
    """Compute the fuzzy grouping key of a line.

    Uses token count, not character count: a line with fewer than 15
    tokens uses all of its tokens.

    Args:
        line: Raw or normalized line text.

    Returns:
        The first 15 tokens of the normalized line joined by single spaces.

    Examples:
        >>> grouping_key("  Alpha   BETA gamma ")
        'alpha beta gamma'
    """
    return " ".join(normalize_line(line).split()[:GROUPING_KEY_TOKENS])


def _normalized_set(contents: Iterable[str]) -> set[str]:
    return {normalize_line(content) for content in contents}


@dataclass(frozen=True)
class DedupOutcome:
    """Result of deduplicating one submission.

    Attributes:
        lines: Accepted lines in input order, verbatim.
        submitted_count: Number of non-blank lines submitted.
        batch_duplicates: Lines dropped as repeats within the submission.
        queued_duplicates: Lines dropped because they are already queued.
        history_duplicates: Lines dropped because they were already claimed.
    """

    lines: tuple[str, ...]
    submitted_count: int
    batch_duplicates: int = 0
    queued_duplicates: int = 0
    history_duplicates: int = 0

    @property
    def unique_count(self) -> int:
        """Number of lines accepted."""
        return len(self.lines)

    @property
    def duplicate_count(self) -> int:
        """Number of non-blank lines rejected for any reason."""
        return self.submitted_count - self.unique_count

    @property
    def all_duplicates(self) -> bool:
        """True if lines were submitted but every one already exists."""
        return self.submitted_count > 0 and self.unique_count == 0


def analyze_submission(
    raw_lines: Sequence[str],
    queue_contents: Iterable[str],
    history_contents: Iterable[str],
) -> DedupOutcome:
    """Deduplicate a submission and report why lines were dropped.

    Args:
        raw_lines: Submitted lines in input order.
        queue_contents: Contents of the team's live queue.
        history_contents: Contents of the team's claim history.

    Returns:
        DedupOutcome with accepted lines and per-reason rejection counts.
    """
    queued = _normalized_set(queue_contents)
    claimed = _normalized_set(history_contents)

    accepted: list[str] = []
    seen_keys: set[str] = set()
    submitted = 0
    batch_dupes = 0
    queued_dupes = 0
    history_dupes = 0

    for line in raw_lines:
        normalized = normalize_line(line)
        if not normalized:
            continue
        submitted += 1

        key = grouping_key(normalized)
        if key in seen_keys:
            batch_dupes += 1
        elif normalized in queued:
            queued_dupes += 1
        elif normalized in claimed:
            history_dupes += 1
        else:
            seen_keys.add(key)
            accepted.append(line)

    return DedupOutcome(
        lines=tuple(accepted),
        submitted_count=submitted,
        batch_duplicates=batch_dupes,
        queued_duplicates=queued_dupes,
        history_duplicates=history_dupes,
    )


def dedupe_lines(
    raw_lines: Sequence[str],
    queue_contents: Iterable[str],
    history_contents: Iterable[str],
) -> list[str]:
    """Return the order-preserving, deduplicated subset of raw_lines.

    Args:
        raw_lines: Submitted lines in input order.
        queue_contents: Contents of the team's live queue.
        history_contents: Contents of the team's claim history.

    Returns:
        Accepted lines, verbatim, in input order. Empty input yields [].

    Examples:
        >>> dedupe_lines(["b", "a", "b"], set(), set())
        ['b', 'a']
        >>> dedupe_lines(["x", "y", "z"], {"x"}, {"y"})
        ['z']
    """
    return list(analyze_submission(raw_lines, queue_contents, history_contents).lines)
