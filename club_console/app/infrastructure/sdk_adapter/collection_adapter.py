from __future__ import annotations

from typing import Any

from club_console.app.application.errors import ActionError, FetchError
from club_console.app.domain.models.collection import CollectionQuery, Entity, PageResult
from club_console.clients.club_api_sdk.collection_client import CollectionClient
from club_console.clients.club_api_sdk.errors import ApiError


class CollectionDataService:
    """Adapts one SDK resource client to the data service the list views depend on."""

    def __init__(self, client: CollectionClient, resource: str) -> None:
        self.client = client
        self.resource = resource

    async def fetch_page(self, query: CollectionQuery) -> PageResult:
        try:
            listing = await self.client.list_page(query.to_params())
        except ApiError as error:
            raise FetchError.from_api_error(error, f"Could not load {self.resource}") from error
        return PageResult(
            items=tuple(listing.rows),
            page=listing.page,
            total_pages=listing.total_pages,
            total_count=listing.total,
            limit=listing.limit,
        )

    async def fetch_stats(self) -> dict[str, Any]:
        try:
            stats = await self.client.stats()
        except ApiError as error:
            raise FetchError.from_api_error(error, f"Could not load {self.resource} statistics") from error
        return stats.model_dump()

    async def fetch_detail(self, item_id: str) -> Entity:
        try:
            return await self.client.detail(item_id)
        except ApiError as error:
            raise FetchError.from_api_error(error, f"Could not load {self.resource} detail") from error

    async def mutate_single(self, item_id: str, action: str) -> dict[str, Any]:
        try:
            return await self.client.action(item_id, action)
        except ApiError as error:
            raise ActionError.from_api_error(error, f"{action} failed for {item_id}") from error

    async def mutate_bulk_status(self, item_ids: list[str], status: str) -> dict[str, Any]:
        try:
            return await self.client.bulk_status(item_ids, status)
        except ApiError as error:
            raise ActionError.from_api_error(error, f"Bulk status '{status}' failed") from error

    async def remove_single(self, item_id: str) -> dict[str, Any]:
        try:
            return await self.client.remove(item_id)
        except ApiError as error:
            raise ActionError.from_api_error(error, f"Delete failed for {item_id}") from error
