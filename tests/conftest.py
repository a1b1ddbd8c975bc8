from __future__ import annotations

import asyncio
import math
from typing import Any

import pytest

from club_console.app.application.errors import ActionError, FetchError
from club_console.app.domain.models.collection import CollectionQuery, PageResult
from club_console.app.listing_cache import ListingCache
from club_console.app.ui.components.confirmation import StaticConfirmation
from club_console.app.ui.components.notifier import NotificationCenter

_ACTION_STATUS = {"approve": "approved", "reject": "rejected", "resolve": "resolved", "unban": "active"}


def make_rows(count: int, prefix: str = "app") -> list[dict[str, Any]]:
    return [
        {
            "id": f"{prefix}-{index:02d}",
            "fullName": f"Student {index:02d}",
            "status": "pending" if index % 2 else "approved",
            "seen": False,
            "createdAt": f"2026-01-{(index % 28) + 1:02d}",
        }
        for index in range(1, count + 1)
    ]


class FakeDataService:
    """In-memory club API that clamps out-of-range pages the way the server does."""

    def __init__(self, rows: list[dict[str, Any]] | None = None) -> None:
        self.rows = list(rows or [])
        self.page_calls: list[CollectionQuery] = []
        self.mutations: list[tuple[Any, ...]] = []
        self.detail_calls: list[str] = []
        self.stats_calls = 0
        self.gates: dict[int, asyncio.Event] = {}
        self.fetch_error: Exception | None = None
        self.stats_error: Exception | None = None
        self.bulk_error: Exception | None = None
        self.failing_ids: set[str] = set()
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def requested_pages(self) -> list[int]:
        return [query.page for query in self.page_calls]

    def _filtered(self, query: CollectionQuery) -> list[dict[str, Any]]:
        rows = self.rows
        if query.search:
            needle = query.search.lower()
            rows = [row for row in rows if needle in row.get("fullName", "").lower()]
        if query.status:
            rows = [row for row in rows if row.get("status") == query.status]
        return rows

    async def fetch_page(self, query: CollectionQuery) -> PageResult:
        self.page_calls.append(query)
        gate = self.gates.get(query.page)
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)
        if self.fetch_error is not None:
            raise self.fetch_error
        rows = self._filtered(query)
        total_pages = max(1, math.ceil(len(rows) / query.limit))
        page = min(query.page, total_pages)
        start = (page - 1) * query.limit
        return PageResult(
            items=tuple(dict(row) for row in rows[start : start + query.limit]),
            page=page,
            total_pages=total_pages,
            total_count=len(rows),
            limit=query.limit,
        )

    async def fetch_stats(self) -> dict[str, Any]:
        self.stats_calls += 1
        await asyncio.sleep(0)
        if self.stats_error is not None:
            raise self.stats_error
        by_status: dict[str, int] = {}
        for row in self.rows:
            by_status[row["status"]] = by_status.get(row["status"], 0) + 1
        return {"total": len(self.rows), "by_status": by_status}

    async def fetch_detail(self, item_id: str) -> dict[str, Any]:
        self.detail_calls.append(item_id)
        await asyncio.sleep(0)
        for row in self.rows:
            if row["id"] == item_id:
                return dict(row)
        raise FetchError(f"{item_id} not found", code="NOT_FOUND")

    async def mutate_single(self, item_id: str, action: str) -> dict[str, Any]:
        self.mutations.append((action, item_id))
        await self._track()
        if item_id in self.failing_ids:
            raise ActionError(f"{action} failed for {item_id}")
        for row in self.rows:
            if row["id"] == item_id:
                if action == "mark-seen":
                    row["seen"] = True
                elif action in _ACTION_STATUS:
                    row["status"] = _ACTION_STATUS[action]
        return {"id": item_id}

    async def mutate_bulk_status(self, item_ids: list[str], status: str) -> dict[str, Any]:
        self.mutations.append(("bulk-status", tuple(item_ids), status))
        await asyncio.sleep(0)
        if self.bulk_error is not None:
            raise self.bulk_error
        for row in self.rows:
            if row["id"] in item_ids:
                row["status"] = status
        return {"modified": len(item_ids)}

    async def remove_single(self, item_id: str) -> dict[str, Any]:
        self.mutations.append(("delete", item_id))
        await self._track()
        if item_id in self.failing_ids:
            raise ActionError(f"Delete failed for {item_id}", code="NOT_FOUND")
        self.rows = [row for row in self.rows if row["id"] != item_id]
        return {"id": item_id}

    async def _track(self) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_service() -> FakeDataService:
    return FakeDataService(make_rows(25))


@pytest.fixture
def cache() -> ListingCache:
    return ListingCache(ttl_seconds=60)


@pytest.fixture
def notifier() -> NotificationCenter:
    return NotificationCenter()


@pytest.fixture
def confirm() -> StaticConfirmation:
    return StaticConfirmation(answer=True)
