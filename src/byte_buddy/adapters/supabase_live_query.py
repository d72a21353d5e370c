"""Polling live queries over Supabase tables."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
from postgrest.exceptions import APIError

from byte_buddy.domain.errors import RemoteReadError
from byte_buddy.services.feeds import ErrorHandler

SUPABASE_ERRORS = (APIError, httpx.HTTPError)

RowsFetcher = Callable[[], list[dict[str, object]]]
RowsHandler = Callable[[list[dict[str, object]]], None]

_logger = logging.getLogger(__name__)


@dataclass
class LiveQuery:
    """A table query whose full result is pushed on every refresh."""

    table: str
    fetch: RowsFetcher
    deliver: RowsHandler
    on_error: ErrorHandler
    active: bool = True

    def refresh(self) -> None:
        """Run the query and deliver the snapshot."""
        if not self.active:
            return
        try:
            rows = self.fetch()
        except SUPABASE_ERRORS as exc:
            if self.active:
                self.on_error(RemoteReadError(str(exc) or type(exc).__name__))
            return
        if self.active:
            self.deliver(rows)

    def cancel(self) -> None:
        """Stop delivering snapshots."""
        self.active = False


@dataclass
class LiveQueryHub:
    """Registry of open live queries, refreshed after writes and on a timer."""

    queries: list[LiveQuery] = field(default_factory=list)

    def open(
        self,
        table: str,
        fetch: RowsFetcher,
        deliver: RowsHandler,
        on_error: ErrorHandler,
    ) -> LiveQuery:
        """Register a query and deliver its first snapshot."""
        query = LiveQuery(table=table, fetch=fetch, deliver=deliver, on_error=on_error)
        self.queries.append(query)
        query.refresh()
        return query

    def notify(self, table: str) -> None:
        """Refresh every open query on a table."""
        self._prune()
        for query in list(self.queries):
            if query.table == table:
                query.refresh()

    def refresh_all(self) -> None:
        """Refresh every open query."""
        self._prune()
        for query in list(self.queries):
            query.refresh()

    def _prune(self) -> None:
        self.queries = [query for query in self.queries if query.active]
