from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Sequence

from .base import DUPLICATE_KEY_CODE, BulkWriteOutcome, WriteFailure
from ..adapters.base import ItemRecord
from ..reconcile.diff import Insert, WriteOp

logger = logging.getLogger(__name__)


class InMemoryItemStore:
    """
    Dict-backed store with the same unique-title rules as the Mongo store.
    Handy for dry runs; nothing survives the process.
    """

    def __init__(self) -> None:
        self.records: Dict[str, ItemRecord] = {}

    @classmethod
    def from_config(cls, config: Any) -> "InMemoryItemStore":
        return cls()

    def ping(self) -> None:
        return None

    def ensure_indexes(self) -> None:
        return None

    def find_by_titles(self, titles: Iterable[str]) -> Dict[str, ItemRecord]:
        return {t: self.records[t] for t in set(titles) if t in self.records}

    def bulk_write(self, ops: Sequence[WriteOp]) -> BulkWriteOutcome:
        outcome = BulkWriteOutcome()
        for index, op in enumerate(ops):
            title = op.item.title
            if isinstance(op, Insert):
                if title in self.records:
                    outcome.failures.append(
                        WriteFailure(index, op, DUPLICATE_KEY_CODE, f"duplicate key: title {title!r}")
                    )
                    continue
                self.records[title] = op.item
                outcome.inserted += 1
            elif title in self.records:
                self.records[title] = op.item
                outcome.updated += 1
            else:
                # Update of a title that vanished since the read: matches nothing.
                logger.debug("Update matched no record for %r", title)
        return outcome

    def close(self) -> None:
        return None
