from __future__ import annotations

from typing import TYPE_CHECKING, Any

from club_console.clients.club_api_sdk.errors import ApiError

if TYPE_CHECKING:
    from club_console.app.application.bulk_actions import BulkActionResult


class ConsoleError(Exception):
    default_code = "CONSOLE_ERROR"

    def __init__(self, message: str, *, code: str | None = None, api_error: ApiError | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or (api_error.code if api_error else self.default_code)
        self.api_error = api_error

    @property
    def trace_id(self) -> str | None:
        return self.api_error.trace_id if self.api_error else None

    @classmethod
    def from_api_error(cls, error: ApiError, context: str) -> "ConsoleError":
        return cls(f"{context}: {error.message}", api_error=error)


class FetchError(ConsoleError):
    default_code = "FETCH_ERROR"


class ActionError(ConsoleError):
    default_code = "ACTION_ERROR"


class ValidationError(ConsoleError):
    default_code = "VALIDATION_ERROR"


class BulkPartialFailure(ConsoleError):
    default_code = "BULK_PARTIAL_FAILURE"

    def __init__(self, message: str, *, result: "BulkActionResult", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.result = result
