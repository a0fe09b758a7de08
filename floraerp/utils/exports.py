from __future__ import annotations

import csv
import io
from typing import Iterable

ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def build_catalog_csv(rows: Iterable) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["code", "name", "price", "current_stock", "updated_at_utc"])
    for item in rows:
        writer.writerow(
            [
                item.code,
                item.name,
                f"{(item.price or 0):.2f}",
                item.current_stock or 0,
                item.updated_at.strftime(ISO_FORMAT) if item.updated_at else "",
            ]
        )
    return buffer.getvalue()
