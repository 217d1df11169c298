"""History query service.

Read-only access to a team's claim history: paged listing and
case-insensitive substring search over line content.
"""

from __future__ import annotations

from structlog import get_logger

from src.application.ports.history_ledger import HistoryLedgerProtocol
from src.config.sorter_config import DEFAULT_SORTER_CONFIG, SorterServiceConfig
from src.domain.errors import NulCharacterError
from src.domain.models.caller_identity import CallerIdentity
from src.domain.models.history_entry import HistoryEntry

logger = get_logger(__name__)


class HistoryQueryService:
    """Service for listing and searching a team's claim history."""

    def __init__(
        self,
        history_ledger: HistoryLedgerProtocol,
        config: SorterServiceConfig = DEFAULT_SORTER_CONFIG,
    ) -> None:
        """Initialize the history query service.

        Args:
            history_ledger: Team-scoped claim history.
            config: Paging limits.
        """
        self._history_ledger = history_ledger
        self._config = config

    def _page_limit(self, limit: int | None) -> int:
        if limit is None:
            return self._config.history_page_limit
        return max(1, min(limit, self._config.history_max_page_limit))

    async def list_history(
        self,
        caller: CallerIdentity,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[HistoryEntry]:
        """List the caller team's history, newest claim first.

        Args:
            caller: Identity of the requesting user.
            limit: Page size; defaults and caps come from config.
            offset: Entries to skip.

        Returns:
            HistoryEntry records for one page.
        """
        return await self._history_ledger.list_entries(
            caller.team_id,
            limit=self._page_limit(limit),
            offset=max(0, offset),
        )

    async def search_history(
        self,
        caller: CallerIdentity,
        query: str,
        limit: int | None = None,
    ) -> list[HistoryEntry]:
        """Search the caller team's history by content substring.

        A blank query lists the newest entries.

        Args:
            caller: Identity of the requesting user.
            query: Case-insensitive substring.
            limit: Maximum results; defaults and caps come from config.

        Returns:
            Matching HistoryEntry records, newest claim first.

        Raises:
            NulCharacterError: The query contains U+0000.
        """
        if "\x00" in query:
            raise NulCharacterError("query")
        needle = query.strip()
        page_limit = self._page_limit(limit)
        if not needle:
            return await self._history_ledger.list_entries(
                caller.team_id, limit=page_limit
            )
        results = await self._history_ledger.search(
            caller.team_id, needle, limit=page_limit
        )
        logger.debug(
            "history_searched",
            team_id=caller.team_id,
            query_length=len(needle),
            result_count=len(results),
        )
        return results

    async def history_count(self, caller: CallerIdentity) -> int:
        """Return the number of history entries for the caller's team."""
        return await self._history_ledger.count(caller.team_id)
