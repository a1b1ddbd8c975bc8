from __future__ import annotations

from club_console.clients.club_api_sdk.collection_client import CollectionClient


class ContactsClient(CollectionClient):
    base_path = "/api/v1/contact"
    single_actions = {
        "resolve": ("PATCH", "/{id}/status", {"status": "resolved"}),
    }
