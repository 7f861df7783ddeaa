from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from ..adapters.base import ItemRecord
from ..errors import DuplicateKey, StoreError
from ..reconcile.diff import WriteOp

#: Server error code for a unique index violation (same value MongoDB uses).
DUPLICATE_KEY_CODE = 11000


@dataclass
class WriteFailure:
    index: int
    op: WriteOp
    code: Optional[int]
    message: str

    @property
    def duplicate(self) -> bool:
        return self.code == DUPLICATE_KEY_CODE

    def to_error(self) -> StoreError:
        if self.duplicate:
            return DuplicateKey(self.op.item.title)
        return StoreError(f"{type(self.op).__name__.lower()} of {self.op.item.title!r} failed: {self.message}")


@dataclass
class BulkWriteOutcome:
    inserted: int = 0
    updated: int = 0
    failures: List[WriteFailure] = field(default_factory=list)


class ItemStore(Protocol):
    """
    Persistence primitives the reconciler depends on.
    Titles are unique at the storage layer.
    """

    def ping(self) -> None:
        """Raise StoreUnavailable when the backend cannot be reached."""
        ...

    def ensure_indexes(self) -> None:
        ...

    def find_by_titles(self, titles: Iterable[str]) -> Dict[str, ItemRecord]:
        """Single batched lookup; titles with no record are simply absent."""
        ...

    def bulk_write(self, ops: Sequence[WriteOp]) -> BulkWriteOutcome:
        """
        Apply all ops without stopping at the first failure.
        Per-op failures are returned; StoreUnavailable is raised only when the
        batch as a whole could not be delivered.
        """
        ...

    def close(self) -> None:
        ...
