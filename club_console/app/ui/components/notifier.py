from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from club_console.app.infrastructure.logging.logger import get_logger


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


@dataclass
class NotificationCenter:
    """Records toasts for the view layer; delivery is fire-and-forget."""

    items: list[dict[str, Any]] = field(default_factory=list)
    logger: logging.Logger = field(default_factory=lambda: get_logger("club_console.notifications"))

    def success(self, message: str) -> None:
        self.toast(level="success", message=message)

    def error(self, message: str) -> None:
        self.toast(level="error", message=message)

    def toast(self, *, level: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
        payload = {"level": level, "message": message, "details": details or {}}
        self.items.append(payload)
        self.logger.log(logging.ERROR if level == "error" else logging.INFO, "[%s] %s", level, message)
        return payload

    def messages(self, level: str | None = None) -> list[str]:
        return [item["message"] for item in self.items if level is None or item["level"] == level]

    def render(self) -> dict[str, Any]:
        return {"count": len(self.items), "messages": list(self.items)}

    def clear(self) -> None:
        self.items.clear()
