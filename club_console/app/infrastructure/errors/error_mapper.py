from club_console.app.application.errors import ConsoleError
from club_console.clients.club_api_sdk.errors import ApiError


class ErrorMapper:
    _KNOWN_CODES = {
        "PERMISSION_DENIED": ("Permission denied for this operation.", "Sign in again with an admin account."),
        "NOT_FOUND": ("The record no longer exists.", "Refresh the list to see the current data."),
        "VALIDATION_ERROR": ("The request was rejected by validation.", "Check the selected records and try again."),
        "UNSUPPORTED_ACTION": ("This action is not available here.", "Use one of the actions offered by the screen."),
        "RATE_LIMITED": ("Too many requests.", "Wait a few seconds before retrying."),
        "TIMEOUT_ERROR": ("The server took too long to respond.", "Refresh to check whether the change was applied."),
        "NETWORK_ERROR": ("The club API is unreachable.", "Check the connection and refresh."),
        "INTERNAL_ERROR": ("Internal error in the club API.", "Retry and share the trace_id if it persists."),
    }

    _STATUS_HINTS = {
        401: ("PERMISSION_DENIED", "Your session is no longer valid.", "Sign in again."),
        403: ("PERMISSION_DENIED", "Permission denied for this operation.", "Sign in again with an admin account."),
        404: ("NOT_FOUND", "The record no longer exists.", "Refresh the list to see the current data."),
        500: ("INTERNAL_ERROR", "Internal error in the club API.", "Retry and share the trace_id if it persists."),
    }

    @classmethod
    def to_payload(cls, error: Exception) -> dict:
        api_error = error.api_error if isinstance(error, ConsoleError) else error
        if isinstance(api_error, ApiError):
            status_code = api_error.status_code or -1
            mapped = cls._STATUS_HINTS.get(status_code)
            if mapped is None and status_code >= 500:
                mapped = cls._STATUS_HINTS[500]
            if mapped is not None:
                code, message, suggestion = mapped
            else:
                message, suggestion = cls._KNOWN_CODES.get(
                    api_error.code,
                    (api_error.message, "Contact support with the trace_id."),
                )
                code = api_error.code
            return {
                "code": code,
                "message": message,
                "details": api_error.details,
                "trace_id": api_error.trace_id,
                "suggestion": suggestion,
            }
        if isinstance(error, ConsoleError):
            return {
                "code": error.code,
                "message": error.message,
                "details": None,
                "trace_id": None,
                "suggestion": "Review the request and try again.",
            }
        return {
            "code": "INTERNAL_ERROR",
            "message": str(error),
            "details": None,
            "trace_id": None,
            "suggestion": "Retry and report the incident if it persists.",
        }

    @classmethod
    def to_display_message(cls, error: Exception) -> str:
        payload = cls.to_payload(error)
        return f"[{payload['code']}] {payload['message']} (trace_id={payload['trace_id']})"
