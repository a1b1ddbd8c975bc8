from __future__ import annotations

from club_console.clients.club_api_sdk.collection_client import CollectionClient


class ApplicationsClient(CollectionClient):
    base_path = "/api/v1/apply"
    bulk_status_path = "/bulk/status"
    single_actions = {
        "approve": ("PATCH", "/{id}/status", {"status": "approved"}),
        "reject": ("PATCH", "/{id}/status", {"status": "rejected"}),
        "mark-seen": ("PATCH", "/{id}/seen", None),
    }
