"""CSV serialization helpers."""

from __future__ import annotations

import csv
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

CSV_FIELDS = [
    "email",
    "domain",
    "query",
    "date_exported_utc",
]


def build_rows(emails: Iterable[str], query: str) -> list[dict[str, str]]:
    """Turn accumulated emails into export rows sorted by address."""
    exported_at = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return [
        {
            "email": email,
            "domain": email.partition("@")[2],
            "query": query,
            "date_exported_utc": exported_at,
        }
        for email in sorted(emails)
    ]


def write_rows(path: str, rows: list[dict[str, str]]) -> None:
    """Write export rows to CSV with stable schema."""
    output_path = Path(path)
    with output_path.open("w", newline="", encoding="utf-8") as file_obj:
        writer = csv.DictWriter(file_obj, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
