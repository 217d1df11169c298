"""FakeClock - Controllable UTC clock for deterministic tests.

Services take a ``clock`` callable returning the current UTC time;
pass a FakeClock to freeze and advance it.

Usage:
    >>> clock = FakeClock(frozen_at=datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc))
    >>> service = LineClaimService(..., clock=clock)
    >>> clock.advance(minutes=5)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

DEFAULT_FROZEN_AT = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, frozen_at: datetime = DEFAULT_FROZEN_AT) -> None:
        if frozen_at.tzinfo is None:
            raise ValueError("frozen_at must be timezone-aware")
        self._now = frozen_at

    def __call__(self) -> datetime:
        return self._now

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta | None = None, **kwargs: float) -> None:
        """Move time forward by ``delta`` or by timedelta keyword arguments."""
        self._now += delta if delta is not None else timedelta(**kwargs)

    def set_time(self, when: datetime) -> None:
        self._now = when
