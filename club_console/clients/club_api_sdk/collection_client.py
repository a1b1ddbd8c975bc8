from __future__ import annotations

from typing import Any

from club_console.clients.club_api_sdk.errors import ApiError
from club_console.clients.club_api_sdk.http_client import HttpClient
from club_console.clients.club_api_sdk.models import CollectionStats, ListingPage
from club_console.clients.club_api_sdk.normalizers import normalize_entity, normalize_listing, normalize_stats, unwrap_data

# action name -> (HTTP method, path suffix, JSON body)
ActionRoute = tuple[str, str, dict[str, Any] | None]


class CollectionClient:
    """Admin endpoints of one paginated resource of the club API."""

    base_path = ""
    stats_path: str | None = "/stats"
    remove_route: ActionRoute = ("DELETE", "/{id}", None)
    bulk_status_path: str | None = None
    single_actions: dict[str, ActionRoute] = {}

    def __init__(self, http_client: HttpClient) -> None:
        self.http_client = http_client

    async def list_page(self, params: dict[str, Any]) -> ListingPage:
        payload = await self.http_client.request("GET", self.base_path, params=_build_query_params(**params))
        return normalize_listing(payload, page=params.get("page") or 1, limit=params.get("limit") or 10)

    async def stats(self) -> CollectionStats:
        if self.stats_path is None:
            return CollectionStats()
        payload = await self.http_client.request("GET", f"{self.base_path}{self.stats_path}")
        return normalize_stats(payload)

    async def detail(self, item_id: str) -> dict[str, Any]:
        payload = await self.http_client.request("GET", f"{self.base_path}/{item_id}")
        data = unwrap_data(payload)
        for key in ("application", "contact", "member", "item"):
            if isinstance(data.get(key), dict):
                data = data[key]
                break
        return normalize_entity(data)

    async def action(self, item_id: str, action: str) -> dict[str, Any]:
        route = self.single_actions.get(action)
        if route is None:
            raise ApiError(
                code="UNSUPPORTED_ACTION",
                message=f"Action '{action}' is not available for {self.base_path}",
            )
        return await self._send(route, item_id)

    async def remove(self, item_id: str) -> dict[str, Any]:
        return await self._send(self.remove_route, item_id)

    async def bulk_status(self, ids: list[str], status: str) -> dict[str, Any]:
        if self.bulk_status_path is None:
            raise ApiError(
                code="UNSUPPORTED_ACTION",
                message=f"Bulk status updates are not available for {self.base_path}",
            )
        payload = await self.http_client.request(
            "PATCH",
            f"{self.base_path}{self.bulk_status_path}",
            json_body={"ids": list(ids), "status": status},
        )
        return unwrap_data(payload)

    async def _send(self, route: ActionRoute, item_id: str) -> dict[str, Any]:
        method, suffix, body = route
        payload = await self.http_client.request(
            method,
            f"{self.base_path}{suffix.format(id=item_id)}",
            json_body=dict(body) if body is not None else None,
        )
        return unwrap_data(payload)


def _build_query_params(**kwargs: Any) -> dict[str, Any]:
    return {key: value for key, value in kwargs.items() if value not in (None, "")}
