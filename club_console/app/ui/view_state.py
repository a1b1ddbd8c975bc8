from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from club_console.app.domain.models.collection import CollectionQuery, Entity, SelectionState


class ViewStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class ViewSnapshot:
    status: ViewStatus
    query: CollectionQuery
    items: tuple[Entity, ...] = ()
    total_pages: int = 1
    total_count: int = 0
    selection: SelectionState = field(default_factory=SelectionState)
    refreshing: bool = False
    error: str | None = None
    stats: dict[str, Any] | None = None

    @property
    def page(self) -> int:
        return self.query.page

    @property
    def has_next(self) -> bool:
        return self.query.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.query.page > 1

    @property
    def is_empty(self) -> bool:
        return self.status is ViewStatus.READY and not self.items

    def render(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "page": self.page,
            "total_pages": self.total_pages,
            "total_count": self.total_count,
            "items": len(self.items),
            "selected": len(self.selection.selected_ids),
            "select_all_on_page": self.selection.select_all_on_page,
            "refreshing": self.refreshing,
            "message": self.error or ("No records" if self.is_empty else self.status.value),
        }
