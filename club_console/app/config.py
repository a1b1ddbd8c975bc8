from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:8000"


@dataclass(frozen=True)
class AppConfig:
    base_url: str
    timeout_seconds: float
    verify_ssl: bool
    retry_max_attempts: int
    retry_backoff_ms: int
    page_size: int = 10
    search_debounce_ms: int = 300
    cache_ttl_seconds: float = 30.0
    export_limit: int = 1000
    bulk_concurrency: int = 5
    access_token: str | None = None

    @classmethod
    def from_env(cls, env_file: str = ".env") -> "AppConfig":
        load_dotenv(env_file, override=False)
        config = cls(
            base_url=os.getenv("CLUB_API_BASE_URL", DEFAULT_BASE_URL).strip(),
            timeout_seconds=float(os.getenv("CLUB_TIMEOUT_SECONDS", "20")),
            verify_ssl=os.getenv("CLUB_VERIFY_SSL", "true").lower() == "true",
            retry_max_attempts=int(os.getenv("CLUB_RETRY_MAX_ATTEMPTS", "3")),
            retry_backoff_ms=int(os.getenv("CLUB_RETRY_BACKOFF_MS", "150")),
            page_size=int(os.getenv("CLUB_PAGE_SIZE", "10")),
            search_debounce_ms=int(os.getenv("CLUB_SEARCH_DEBOUNCE_MS", "300")),
            cache_ttl_seconds=float(os.getenv("CLUB_CACHE_TTL_SECONDS", "30")),
            export_limit=int(os.getenv("CLUB_EXPORT_LIMIT", "1000")),
            bulk_concurrency=int(os.getenv("CLUB_BULK_CONCURRENCY", "5")),
            access_token=(os.getenv("CLUB_ACCESS_TOKEN") or "").strip() or None,
        )
        config.validate()
        return config

    def validate(self) -> None:
        if not self.base_url:
            raise ValueError("CLUB_API_BASE_URL must not be empty")
        if self.timeout_seconds <= 0:
            raise ValueError("CLUB_TIMEOUT_SECONDS must be greater than 0")
        if self.retry_max_attempts < 1:
            raise ValueError("CLUB_RETRY_MAX_ATTEMPTS must be >= 1")
        if self.retry_backoff_ms < 0:
            raise ValueError("CLUB_RETRY_BACKOFF_MS must be >= 0")
        if self.page_size < 1:
            raise ValueError("CLUB_PAGE_SIZE must be >= 1")
        if self.search_debounce_ms < 0:
            raise ValueError("CLUB_SEARCH_DEBOUNCE_MS must be >= 0")
        if self.export_limit < 1:
            raise ValueError("CLUB_EXPORT_LIMIT must be >= 1")
        if self.bulk_concurrency < 1:
            raise ValueError("CLUB_BULK_CONCURRENCY must be >= 1")
