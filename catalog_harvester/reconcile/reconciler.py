from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Sequence

from .diff import Insert, Update, Unchanged, compute_diff, write_ops
from ..adapters.base import ItemRecord
from ..errors import StoreError, StoreUnavailable

if TYPE_CHECKING:
    from ..store.base import ItemStore

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """
    Counts for one reconcile pass. ``inserts``/``updates`` are what the diff
    scheduled; ``inserted``/``updated`` are what the store confirmed.
    """
    inserts: int = 0
    updates: int = 0
    unchanged: int = 0
    inserted: int = 0
    updated: int = 0
    duplicates: int = 0
    errors: List[StoreError] = field(default_factory=list)
    aborted: bool = False

    @property
    def attempted(self) -> int:
        return self.inserts + self.updates

    @property
    def failed(self) -> int:
        return len(self.errors)


class Reconciler:
    def __init__(self, store: "ItemStore") -> None:
        self.store = store

    def reconcile(self, items: Sequence[ItemRecord]) -> ReconcileResult:
        result = ReconcileResult()
        if not items:
            logger.info("No items to reconcile")
            return result

        try:
            existing = self.store.find_by_titles(item.title for item in items)
        except StoreUnavailable as exc:
            logger.error("Error reading existing items: %s", exc)
            result.errors.append(exc)
            result.aborted = True
            return result

        ops = compute_diff(items, existing)
        for op in ops:
            if isinstance(op, Insert):
                result.inserts += 1
            elif isinstance(op, Update):
                result.updates += 1
            elif isinstance(op, Unchanged):
                result.unchanged += 1

        pending = write_ops(ops)
        if pending:
            try:
                outcome = self.store.bulk_write(pending)
            except StoreUnavailable as exc:
                logger.error("Error saving items: %s", exc)
                result.errors.append(exc)
                result.aborted = True
                return result

            result.inserted = outcome.inserted
            result.updated = outcome.updated
            for failure in outcome.failures:
                error = failure.to_error()
                result.errors.append(error)
                if failure.duplicate:
                    result.duplicates += 1
                    logger.warning("Duplicate key error: %s already exists", failure.op.item.title)
                else:
                    logger.warning("Write failed: %s", error)

        logger.info("%s items processed in total", result.attempted)
        logger.info("%s items updated", result.updated)
        logger.info("%s new items saved", result.inserted)
        return result
