from __future__ import annotations

from dataclasses import dataclass, field

from club_console.app.application.query_fetcher import QueryFetcher
from club_console.app.collection_controller import CollectionViewController
from club_console.app.config import AppConfig
from club_console.app.infrastructure.logging.logger import get_logger, log_action
from club_console.app.infrastructure.sdk_adapter.collection_adapter import CollectionDataService
from club_console.app.listing_cache import ListingCache
from club_console.app.screens import get_screen
from club_console.app.ui.components.confirmation import ConfirmationGate, console_confirm
from club_console.app.ui.components.notifier import NotificationCenter, Notifier
from club_console.clients.club_api_sdk import ApplicationsClient, ContactsClient, HttpClient, MembersClient
from club_console.clients.club_api_sdk.collection_client import CollectionClient

CLIENT_TYPES: dict[str, type[CollectionClient]] = {
    "applications": ApplicationsClient,
    "contacts": ContactsClient,
    "members": MembersClient,
}


@dataclass
class ConsoleRuntime:
    """Shared wiring for every list screen: one HTTP client, one cache, one fetcher."""

    config: AppConfig
    http_client: HttpClient
    cache: ListingCache
    fetcher: QueryFetcher
    services: dict[str, CollectionDataService] = field(default_factory=dict)

    def service(self, resource: str) -> CollectionDataService:
        if resource not in self.services:
            try:
                client_type = CLIENT_TYPES[resource]
            except KeyError as exc:
                raise KeyError(f"Unknown screen '{resource}'") from exc
            self.services[resource] = CollectionDataService(client_type(self.http_client), resource)
        return self.services[resource]

    def open_screen(
        self,
        resource: str,
        notifier: Notifier | None = None,
        confirm: ConfirmationGate = console_confirm,
    ) -> CollectionViewController:
        screen = get_screen(resource)
        return CollectionViewController(
            screen,
            self.service(resource),
            self.cache,
            notifier or NotificationCenter(),
            confirm,
            fetcher=self.fetcher,
            page_size=self.config.page_size,
            search_debounce_ms=self.config.search_debounce_ms,
            bulk_concurrency=self.config.bulk_concurrency,
            export_limit=self.config.export_limit,
        )

    async def aclose(self) -> None:
        await self.http_client.aclose()


def build_runtime(config: AppConfig | None = None) -> ConsoleRuntime:
    config = config or AppConfig.from_env()
    config.validate()
    http_client = HttpClient(
        base_url=config.base_url,
        timeout_seconds=config.timeout_seconds,
        verify_ssl=config.verify_ssl,
        retry_max_attempts=config.retry_max_attempts,
        retry_backoff_ms=config.retry_backoff_ms,
        access_token=config.access_token,
    )
    cache = ListingCache(ttl_seconds=config.cache_ttl_seconds)
    log_action(
        get_logger("club_console.bootstrap"),
        module="runtime",
        action="start",
        outcome="ready",
        base_url=config.base_url,
        timeout_seconds=config.timeout_seconds,
        retry_max_attempts=config.retry_max_attempts,
    )
    return ConsoleRuntime(config=config, http_client=http_client, cache=cache, fetcher=QueryFetcher(cache))
