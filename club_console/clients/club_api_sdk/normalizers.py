from __future__ import annotations

import math
from typing import Any

from club_console.clients.club_api_sdk.models import CollectionStats, ListingPage

_ROW_KEYS = ("docs", "items", "rows", "members", "data")


def normalize_listing(payload: Any, *, page: int = 1, limit: int = 10) -> ListingPage:
    safe_page = max(1, int(page or 1))
    safe_limit = max(1, int(limit or 10))

    rows: list[Any] = []
    meta: dict[str, Any] = {}

    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, dict):
        sources = [payload]
        if isinstance(payload.get("data"), dict):
            sources.append(payload["data"])
        for source in sources:
            for key in ("pagination", "meta"):
                if isinstance(source.get(key), dict):
                    meta.update(source[key])
            meta.update({key: value for key, value in source.items() if not isinstance(value, (dict, list))})
        for source in reversed(sources):
            found = next((source[key] for key in _ROW_KEYS if isinstance(source.get(key), list)), None)
            if found is not None:
                rows = found
                break

    entities = [normalize_entity(row) for row in rows if isinstance(row, dict)]
    total = _first_int(meta, "totalDocs", "total", "total_count", "totalCount", "totalMembers")
    total_pages = _first_int(meta, "totalPages", "total_pages")
    safe_page = _first_int(meta, "currentPage", "page") or safe_page
    safe_limit = _first_int(meta, "limit", "page_size", "per_page") or safe_limit

    if total is None:
        total = len(entities) if safe_page == 1 and (total_pages or 1) == 1 else 0
    if total_pages is None:
        total_pages = math.ceil(total / max(1, safe_limit)) if total else 1

    return ListingPage(
        rows=entities,
        page=max(1, safe_page),
        limit=max(1, safe_limit),
        total=max(0, total),
        total_pages=max(1, total_pages),
    )


def normalize_entity(row: dict[str, Any]) -> dict[str, Any]:
    entity = dict(row)
    identifier = entity.get("id") or entity.get("_id")
    if identifier is not None:
        entity["id"] = str(identifier)
    return entity


def normalize_stats(payload: Any) -> CollectionStats:
    source = payload
    if isinstance(source, dict) and isinstance(source.get("data"), dict):
        source = source["data"]
    if isinstance(source, dict) and isinstance(source.get("stats"), dict):
        source = source["stats"]
    return CollectionStats.model_validate(source if isinstance(source, dict) else {})


def unwrap_data(payload: dict[str, Any]) -> dict[str, Any]:
    data = payload.get("data")
    return data if isinstance(data, dict) else payload


def _first_int(values: dict[str, Any], *keys: str) -> int | None:
    for key in keys:
        converted = _to_int(values.get(key))
        if converted is not None:
            return converted
    return None


def _to_int(value: Any) -> int | None:
    try:
        if value is None or value == "" or isinstance(value, bool):
            return None
        return int(value)
    except (TypeError, ValueError):
        return None
