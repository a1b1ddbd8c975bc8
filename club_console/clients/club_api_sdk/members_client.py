from __future__ import annotations

from club_console.clients.club_api_sdk.collection_client import CollectionClient


class MembersClient(CollectionClient):
    base_path = "/api/v1/members"
    stats_path = None
    remove_route = ("PUT", "/{id}/remove", {})
    single_actions = {
        "unban": ("PUT", "/{id}/unban", None),
    }
