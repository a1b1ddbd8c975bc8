from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

Entity = Mapping[str, Any]

SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class CollectionQuery:
    page: int = 1
    limit: int = 10
    search: str | None = None
    status: str | None = None
    sort_by: str | None = None
    sort_order: str | None = None

    def with_page(self, page: int) -> "CollectionQuery":
        return replace(self, page=max(1, int(page)))

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"page": self.page, "limit": self.limit}
        optional = {
            "search": self.search,
            "status": self.status,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
        }
        params.update({key: value for key, value in optional.items() if value is not None})
        return params

    def cache_key(self, resource: str) -> str:
        return f"{list_prefix(resource)}{json.dumps(self.to_params(), sort_keys=True)}"


@dataclass(frozen=True)
class PageResult:
    items: tuple[Entity, ...] = ()
    page: int = 1
    total_pages: int = 1
    total_count: int = 0
    limit: int = 10

    @property
    def ids(self) -> list[str]:
        return [entity_id(item) for item in self.items]

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass(frozen=True)
class SelectionState:
    selected_ids: frozenset[str] = field(default_factory=frozenset)
    select_all_on_page: bool = False


def entity_id(item: Entity) -> str:
    identifier = item.get("id") or item.get("_id")
    return str(identifier) if identifier is not None else ""


def list_prefix(resource: str) -> str:
    return f"{resource}:list:"


def stats_key(resource: str) -> str:
    return f"{resource}:stats"


def detail_key(resource: str, item_id: str) -> str:
    return f"{resource}:detail:{item_id}"
