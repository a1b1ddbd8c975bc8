from __future__ import annotations

from typing import Any

from club_console.app.domain.models.collection import SORT_ORDERS, CollectionQuery

ALL_STATUSES = "all"

_UNSET: Any = object()


def clean_filters(filters: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in filters.items() if value not in (None, "")}


def build_query(
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    status: str | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> CollectionQuery:
    search_term = (search or "").strip()
    status_value = (status or "").strip()
    if status_value.lower() == ALL_STATUSES:
        status_value = ""
    order = (sort_order or "").strip().lower()
    filters = clean_filters(
        {
            "search": search_term,
            "status": status_value,
            "sort_by": (sort_by or "").strip(),
            "sort_order": order if order in SORT_ORDERS else None,
        }
    )
    return CollectionQuery(page=max(1, int(page or 1)), limit=max(1, int(limit or 1)), **filters)


def update_query(
    current: CollectionQuery,
    *,
    page: int | None = None,
    limit: int | None = None,
    search: str | None = _UNSET,
    status: str | None = _UNSET,
    sort_by: str | None = _UNSET,
    sort_order: str | None = _UNSET,
) -> CollectionQuery:
    candidate = build_query(
        page=current.page if page is None else page,
        limit=current.limit if limit is None else limit,
        search=current.search if search is _UNSET else search,
        status=current.status if status is _UNSET else status,
        sort_by=current.sort_by if sort_by is _UNSET else sort_by,
        sort_order=current.sort_order if sort_order is _UNSET else sort_order,
    )
    if candidate.search != current.search or candidate.status != current.status:
        return candidate.with_page(1)
    return candidate


def export_query(current: CollectionQuery, limit: int) -> CollectionQuery:
    return build_query(
        page=1,
        limit=limit,
        search=current.search,
        status=current.status,
        sort_by=current.sort_by,
        sort_order=current.sort_order,
    )
