from __future__ import annotations

import json
from typing import Sequence
from pathlib import Path

from ..adapters.base import ItemRecord


class JSONExporter:
    def export(self, items: Sequence[ItemRecord], path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump([item.to_dict() for item in items], f, indent=2, ensure_ascii=False)
