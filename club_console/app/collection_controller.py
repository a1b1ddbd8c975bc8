from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Iterable
from pathlib import Path
from typing import Any

from club_console.app.application.actions import ActionKind
from club_console.app.application.bulk_actions import BulkActionExecutor, BulkActionResult
from club_console.app.application.data_service import DataService
from club_console.app.application.errors import FetchError
from club_console.app.application.prefetch import PrefetchController
from club_console.app.application.query_fetcher import QueryFetcher
from club_console.app.application.single_action import ActionOutcome, SingleActionExecutor
from club_console.app.domain.models.collection import (
    CollectionQuery,
    Entity,
    PageResult,
    detail_key,
    stats_key,
)
from club_console.app.export.csv_exporter import export_rows_csv
from club_console.app.infrastructure.errors.error_mapper import ErrorMapper
from club_console.app.infrastructure.logging.logger import get_logger, log_action
from club_console.app.listing_cache import ListingCache
from club_console.app.screens import ScreenDefinition
from club_console.app.ui import pagination
from club_console.app.ui.components.confirmation import ConfirmationGate
from club_console.app.ui.components.notifier import Notifier
from club_console.app.ui.debounce import SearchDebouncer
from club_console.app.ui.filters import build_query, export_query, update_query
from club_console.app.ui.pagination import PageStateSynchronizer
from club_console.app.ui.selection import SelectionSetManager
from club_console.app.ui.view_state import ViewSnapshot, ViewStatus


class CollectionViewController:
    """State machine behind one paginated admin list.

    Every load carries a generation number and its response is applied only while
    that generation is current. Invalidations of the shown collection trigger a
    background revalidation that keeps the previous rows visible.
    """

    def __init__(
        self,
        screen: ScreenDefinition,
        service: DataService,
        cache: ListingCache,
        notifier: Notifier,
        confirm: ConfirmationGate,
        *,
        fetcher: QueryFetcher | None = None,
        page_size: int = 10,
        search_debounce_ms: int = 300,
        bulk_concurrency: int = 5,
        export_limit: int = 1000,
        initial_query: CollectionQuery | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.screen = screen
        self.service = service
        self.cache = cache
        self.notifier = notifier
        self.export_limit = export_limit
        self.logger = logger or get_logger("club_console.collection")
        self.fetcher = fetcher or QueryFetcher(cache)
        self.selection = SelectionSetManager()
        self.synchronizer = PageStateSynchronizer()
        self.prefetcher = PrefetchController(service, self.fetcher, screen.resource, logger=self.logger)
        self.single_actions = SingleActionExecutor(
            screen, service, cache, self.selection, notifier, confirm, logger=self.logger
        )
        self.bulk_actions = BulkActionExecutor(
            screen,
            service,
            cache,
            self.selection,
            notifier,
            confirm,
            concurrency=bulk_concurrency,
            logger=self.logger,
        )

        self._query = initial_query or build_query(page=1, limit=page_size)
        self.debouncer = SearchDebouncer(self.apply_search, wait_ms=search_debounce_ms, initial=self._query.search or "")
        self._status = ViewStatus.IDLE
        self._result: PageResult | None = None
        self._error: str | None = None
        self._refreshing = False
        self._stats: dict[str, Any] | None = None
        self._generation = 0
        self._mounted = False
        self._closed = False
        self._background: set[asyncio.Task[Any]] = set()
        self._revalidation_pending = False
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def query(self) -> CollectionQuery:
        return self._query

    @property
    def status(self) -> ViewStatus:
        return self._status

    @property
    def result(self) -> PageResult | None:
        return self._result

    @property
    def items(self) -> tuple[Entity, ...]:
        return self._result.items if self._result else ()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def current_key(self) -> str:
        return self._query.cache_key(self.screen.resource)

    def snapshot(self) -> ViewSnapshot:
        return ViewSnapshot(
            status=self._status,
            query=self._query,
            items=self.items,
            total_pages=self._result.total_pages if self._result else 1,
            total_count=self._result.total_count if self._result else 0,
            selection=self.selection.state(),
            refreshing=self._refreshing,
            error=self._error,
            stats=self._stats,
        )

    # lifecycle

    async def mount(self) -> ViewSnapshot:
        if not self._mounted:
            self._mounted = True
            self._closed = False
            self._unsubscribe = self.cache.subscribe(self._on_invalidated)
            await self._load(self._query)
        return self.snapshot()

    async def teardown(self) -> None:
        self._closed = True
        self._mounted = False
        self._generation += 1
        self.debouncer.cancel()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        tasks = list(self._background)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._revalidation_pending = False
        self._background.clear()

    async def wait_idle(self) -> None:
        await self.debouncer.wait_idle()
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # query changes

    def set_search_text(self, text: str | None) -> None:
        self.debouncer.push(text)

    async def apply_search(self, text: str | None) -> ViewSnapshot:
        # direct calls bypass the debouncer, so record the applied text there
        self.debouncer.reset(text or "")
        return await self._change_query(update_query(self._query, search=text))

    async def set_status(self, status: str | None) -> ViewSnapshot:
        self.screen.check_status(status)
        return await self._change_query(update_query(self._query, status=status))

    async def set_sort(self, sort_by: str | None, sort_order: str | None = "desc") -> ViewSnapshot:
        self.screen.check_sort_field(sort_by)
        return await self._change_query(update_query(self._query, sort_by=sort_by, sort_order=sort_order))

    async def set_page_size(self, limit: int) -> ViewSnapshot:
        return await self._change_query(update_query(self._query, page=1, limit=limit))

    async def goto_page(self, page: int) -> ViewSnapshot:
        # the server clamps out-of-range pages and the response is adopted
        return await self._change_query(self._query.with_page(pagination.goto_page(page)))

    async def next_page(self) -> ViewSnapshot:
        total_pages = self._result.total_pages if self._result else None
        return await self._change_query(self._query.with_page(pagination.next_page(self._query.page, total_pages)))

    async def prev_page(self) -> ViewSnapshot:
        return await self._change_query(self._query.with_page(pagination.prev_page(self._query.page)))

    async def refresh(self) -> ViewSnapshot:
        await self._load(self._query, force=True)
        return self.snapshot()

    async def _change_query(self, query: CollectionQuery) -> ViewSnapshot:
        if query == self._query and self._status is ViewStatus.READY:
            return self.snapshot()
        self._query = query
        await self._load(query)
        return self.snapshot()

    # loading

    async def _load(self, query: CollectionQuery, *, force: bool = False, background: bool = False) -> None:
        self._generation += 1
        generation = self._generation
        key = query.cache_key(self.screen.resource)
        if background:
            self._refreshing = True
        else:
            self._status = ViewStatus.LOADING
            self._error = None

        try:
            result = await self.fetcher.fetch(key, lambda: self.service.fetch_page(query), force=force)
        except FetchError as error:
            if not self._is_current(generation):
                self._log_discarded(query, generation)
                return
            self._refreshing = False
            message = ErrorMapper.to_display_message(error)
            self._error = message
            if not (background and self._status is ViewStatus.READY):
                self._status = ViewStatus.ERROR
            self.notifier.error(message)
            log_action(
                self.logger,
                module=self.screen.resource,
                action="revalidate" if background else "load",
                outcome="error",
                trace_id=error.trace_id,
                code=error.code,
                page=query.page,
            )
            return

        if not self._is_current(generation):
            self._log_discarded(query, generation)
            return
        self._apply_result(query, result)

    def _apply_result(self, query: CollectionQuery, result: PageResult) -> None:
        adopted = self.synchronizer.reconcile(query.page, result)
        if adopted is not None:
            requested = query.page
            query = query.with_page(adopted)
            # the adopted page is already in hand; seed its key instead of fetching it
            self.cache.set(query.cache_key(self.screen.resource), result)
            log_action(
                self.logger,
                module=self.screen.resource,
                action="adopt_page",
                outcome="adopted",
                requested_page=requested,
                server_page=adopted,
                total_pages=result.total_pages,
            )

        self._query = query
        self._result = result
        self._status = ViewStatus.READY
        self._error = None
        self._refreshing = False
        self.selection.reconcile(result.items, page_key=query.cache_key(self.screen.resource))
        if self.prefetcher.next_query(query, result) is not None:
            self._schedule(self.prefetcher.prefetch_next(query, result))

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _log_discarded(self, query: CollectionQuery, generation: int) -> None:
        log_action(
            self.logger,
            module=self.screen.resource,
            action="load",
            outcome="discarded_stale",
            level=logging.DEBUG,
            page=query.page,
            generation=generation,
            current_generation=self._generation,
        )

    def _schedule(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            return None
        task = loop.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    def _on_invalidated(self, prefix: str) -> None:
        if self._closed or not self._mounted:
            return
        if self.current_key.startswith(prefix):
            if not self._revalidation_pending and self._schedule(self._revalidate()) is not None:
                self._revalidation_pending = True
        if self._stats is not None and stats_key(self.screen.resource).startswith(prefix):
            self._schedule(self.load_stats())

    async def _revalidate(self) -> None:
        # let the invalidating operation finish its own bookkeeping first
        await asyncio.sleep(0)
        self._revalidation_pending = False
        if self._closed:
            return
        await self._load(self._query, background=True)

    # selection

    def toggle_select(self, item_id: str, selected: bool) -> ViewSnapshot:
        self.selection.toggle(item_id, selected)
        return self.snapshot()

    def toggle_select_all(self, selected: bool) -> ViewSnapshot:
        self.selection.toggle_all_on_page(selected)
        return self.snapshot()

    def clear_selection(self) -> ViewSnapshot:
        self.selection.clear()
        return self.snapshot()

    # mutations

    async def run_action(self, item_id: str, action: ActionKind | str) -> ActionOutcome:
        return await self.single_actions.execute(item_id, action)

    async def run_bulk_action(
        self, action: ActionKind | str, ids: Iterable[str] | None = None
    ) -> BulkActionResult | None:
        if ids is None:
            selected = self.selection.selected_ids
            # keep on-page order first so results read like the table
            ids = [item_id for item_id in self.selection.page_ids if item_id in selected]
            ids += sorted(selected.difference(ids))
        return await self.bulk_actions.execute(ids, action)

    # secondary reads

    async def load_stats(self, *, force: bool = False) -> dict[str, Any] | None:
        try:
            stats = await self.fetcher.fetch(stats_key(self.screen.resource), self.service.fetch_stats, force=force)
        except FetchError as error:
            self.notifier.error(ErrorMapper.to_display_message(error))
            log_action(
                self.logger,
                module=self.screen.resource,
                action="stats",
                outcome="error",
                trace_id=error.trace_id,
                code=error.code,
            )
            return None
        if self._closed:
            return None
        self._stats = dict(stats)
        return self._stats

    async def open_detail(self, item_id: str) -> Entity | None:
        try:
            detail = await self.fetcher.fetch(
                detail_key(self.screen.resource, item_id), lambda: self.service.fetch_detail(item_id)
            )
        except FetchError as error:
            self.notifier.error(ErrorMapper.to_display_message(error))
            log_action(
                self.logger,
                module=self.screen.resource,
                action="detail",
                outcome="error",
                trace_id=error.trace_id,
                item_id=item_id,
            )
            return None
        if self.screen.mark_seen_on_open and not detail.get("seen") and "mark-seen" in self.screen.actions:
            await self.single_actions.execute(item_id, "mark-seen")
        return detail

    async def export_all(self) -> list[Entity] | None:
        query = export_query(self._query, self.export_limit)
        try:
            result = await self.service.fetch_page(query)
        except FetchError as error:
            self.notifier.error(ErrorMapper.to_display_message(error))
            log_action(self.logger, module=self.screen.resource, action="export", outcome="error", code=error.code)
            return None
        log_action(
            self.logger,
            module=self.screen.resource,
            action="export",
            outcome="fetched",
            rows=len(result.items),
            total=result.total_count,
            **query.to_params(),
        )
        if result.total_count > len(result.items):
            self.notifier.error(
                f"Export truncated to {len(result.items)} of {result.total_count} {self.screen.noun_plural}."
            )
        return list(result.items)

    async def export_csv(self, output_dir: str | Path = "out/exports", *, all_pages: bool = True) -> Path | None:
        rows = await self.export_all() if all_pages else list(self.items)
        if rows is None:
            return None
        if not rows:
            self.notifier.error(f"No {self.screen.noun_plural} to export.")
            return None
        filters = {key: value for key, value in self._query.to_params().items() if key not in ("page", "limit")}
        path = export_rows_csv(
            resource=self.screen.resource,
            rows=rows,
            headers=self.screen.export_headers,
            output_dir=output_dir,
            filters=filters,
        )
        self.notifier.success(f"Exported {len(rows)} {self.screen.noun_plural} to {path}.")
        return path
