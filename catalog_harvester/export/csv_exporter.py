from __future__ import annotations

import csv
from typing import Sequence
from pathlib import Path

from ..adapters.base import ItemRecord


class CSVExporter:
    """
    Writes one row per scraped item, in crawl order.
    """

    _headers = ["title", "price", "rating"]

    def export(self, items: Sequence[ItemRecord], path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            w = csv.writer(f)
            w.writerow(self._headers)
            for item in items:
                w.writerow([item.title, item.price, item.rating])
