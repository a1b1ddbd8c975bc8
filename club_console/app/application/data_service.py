from __future__ import annotations

from typing import Any, Protocol

from club_console.app.domain.models.collection import CollectionQuery, Entity, PageResult


class DataService(Protocol):
    async def fetch_page(self, query: CollectionQuery) -> PageResult: ...

    async def fetch_stats(self) -> dict[str, Any]: ...

    async def fetch_detail(self, item_id: str) -> Entity: ...

    async def mutate_single(self, item_id: str, action: str) -> dict[str, Any]: ...

    async def mutate_bulk_status(self, item_ids: list[str], status: str) -> dict[str, Any]: ...

    async def remove_single(self, item_id: str) -> dict[str, Any]: ...
