from __future__ import annotations

import asyncio
from typing import Any

import httpx

from club_console.clients.club_api_sdk.errors import ApiError


class HttpClient:
    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 20,
        verify_ssl: bool = True,
        retry_max_attempts: int = 3,
        retry_backoff_ms: int = 150,
        access_token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout_seconds,
            verify=verify_ssl,
        )
        self._retry_max_attempts = max(1, retry_max_attempts)
        self._retry_backoff_ms = max(0, retry_backoff_ms)

    async def request(
        self,
        method: str,
        path: str,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        request_headers = dict(headers or {})
        if self.access_token:
            request_headers["Authorization"] = f"Bearer {self.access_token}"

        normalized_path = path if path.startswith("/") else f"/{path}"
        allow_retry = method.upper() == "GET"

        for attempt in range(1, self._retry_max_attempts + 1):
            try:
                response = await self._client.request(
                    method=method,
                    url=normalized_path,
                    json=json_body,
                    headers=request_headers,
                    params=params,
                )
            except httpx.TimeoutException as exc:
                if (not allow_retry) or attempt >= self._retry_max_attempts:
                    raise ApiError(
                        code="TIMEOUT_ERROR",
                        message="The request timed out while calling the club API",
                        details=str(exc),
                        status_code=None,
                    ) from exc
                await self._backoff(attempt)
                continue
            except httpx.TransportError as exc:
                if (not allow_retry) or attempt >= self._retry_max_attempts:
                    raise ApiError(
                        code="NETWORK_ERROR",
                        message="Network error while calling the club API",
                        details=str(exc),
                        status_code=None,
                    ) from exc
                await self._backoff(attempt)
                continue

            if response.status_code >= 400:
                error = ApiError.from_http_response(response)
                if allow_retry and self._is_retryable_status(error.status_code) and attempt < self._retry_max_attempts:
                    await self._backoff(attempt)
                    continue
                raise error

            try:
                payload = response.json()
            except ValueError:
                return {}
            return payload if isinstance(payload, dict) else {"data": payload}

        raise ApiError(code="NETWORK_ERROR", message="Network error while calling the club API", details="retry exhausted")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _backoff(self, attempt: int) -> None:
        await asyncio.sleep((self._retry_backoff_ms * attempt) / 1000)

    @staticmethod
    def _is_retryable_status(status_code: int | None) -> bool:
        return bool(status_code and 500 <= status_code <= 599)
