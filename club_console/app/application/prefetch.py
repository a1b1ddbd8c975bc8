from __future__ import annotations

import logging

from club_console.app.application.data_service import DataService
from club_console.app.application.query_fetcher import QueryFetcher
from club_console.app.domain.models.collection import CollectionQuery, PageResult
from club_console.app.infrastructure.logging.logger import get_logger, log_action


class PrefetchController:
    """Best-effort warm-up of the next page under the same query parameters."""

    def __init__(
        self,
        service: DataService,
        fetcher: QueryFetcher,
        resource: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self.service = service
        self.fetcher = fetcher
        self.resource = resource
        self.logger = logger or get_logger("club_console.prefetch")

    def next_query(self, query: CollectionQuery, result: PageResult) -> CollectionQuery | None:
        if result.page >= result.total_pages:
            return None
        return query.with_page(result.page + 1)

    async def prefetch_next(self, query: CollectionQuery, result: PageResult) -> bool:
        next_query = self.next_query(query, result)
        if next_query is None:
            return False
        key = next_query.cache_key(self.resource)
        if self.fetcher.cached(key) is not None or self.fetcher.is_inflight(key):
            return False
        try:
            await self.fetcher.fetch(key, lambda: self.service.fetch_page(next_query))
        except Exception as error:  # noqa: BLE001
            log_action(
                self.logger,
                module=self.resource,
                action="prefetch",
                outcome="ignored_error",
                level=logging.DEBUG,
                page=next_query.page,
                error=str(error),
            )
            return False
        return True
