from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Union

from ..adapters.base import ItemRecord


@dataclass(frozen=True)
class Insert:
    item: ItemRecord


@dataclass(frozen=True)
class Update:
    item: ItemRecord
    previous: ItemRecord


@dataclass(frozen=True)
class Unchanged:
    item: ItemRecord


DiffOp = Union[Insert, Update, Unchanged]
WriteOp = Union[Insert, Update]


def compute_diff(scraped: Iterable[ItemRecord], existing: Dict[str, ItemRecord]) -> List[DiffOp]:
    """
    Compare scraped items against persisted ones, keyed by title.
    - unknown title: Insert
    - known title with a different price or rating: Update
    - otherwise: Unchanged
    A title seen twice in one scrape is compared against what this run has
    already scheduled, so it never yields two inserts.
    """
    known = dict(existing)
    ops: List[DiffOp] = []
    for item in scraped:
        current = known.get(item.title)
        if current is None:
            ops.append(Insert(item))
        elif not item.same_values(current):
            ops.append(Update(item, previous=current))
        else:
            ops.append(Unchanged(item))
        known[item.title] = item
    return ops


def write_ops(ops: Iterable[DiffOp]) -> List[WriteOp]:
    return [op for op in ops if not isinstance(op, Unchanged)]
