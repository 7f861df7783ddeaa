from __future__ import annotations

from typing import Protocol, Sequence

from ..adapters.base import ItemRecord

class Exporter(Protocol):
    def export(self, items: Sequence[ItemRecord], path: str) -> None:
        ...
