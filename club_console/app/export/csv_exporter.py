from __future__ import annotations

import csv
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

EMPTY_VALUE = ""
SENSITIVE_KEYS = {"token", "secret", "password", "otp"}


def format_cell(value: Any) -> str:
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, datetime):
        return value.astimezone().strftime("%Y-%m-%d %H:%M:%S %z")
    if isinstance(value, (list, tuple)):
        return "; ".join(format_cell(item) for item in value)
    return str(value).strip()


def sanitize_row(row: Mapping[str, Any], headers: Sequence[str]) -> dict[str, str]:
    sanitized: dict[str, str] = {}
    for header in headers:
        if any(token in header.lower() for token in SENSITIVE_KEYS):
            sanitized[header] = EMPTY_VALUE
            continue
        sanitized[header] = format_cell(row.get(header))
    return sanitized


def export_rows_csv(
    *,
    resource: str,
    rows: Iterable[Mapping[str, Any]],
    headers: Sequence[str],
    output_dir: str | Path = "out/exports",
    filters: Mapping[str, Any] | None = None,
) -> Path:
    destination = Path(output_dir)
    destination.mkdir(parents=True, exist_ok=True)

    now = datetime.now().astimezone()
    path = destination / f"{resource}_{now.strftime('%Y%m%d_%H%M%S_%f')}.csv"

    with path.open("w", newline="", encoding="utf-8-sig") as handle:
        handle.write(f"# exported_at: {now.isoformat()}\n")
        handle.write(f"# resource: {resource}\n")
        handle.write(f"# filters: {dict(filters or {})}\n")
        writer = csv.DictWriter(handle, fieldnames=list(headers), extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(sanitize_row(row, headers))

    return path
