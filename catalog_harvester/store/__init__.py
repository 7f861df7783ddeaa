from .base import BulkWriteOutcome, ItemStore, WriteFailure
from .memory import InMemoryItemStore

__all__ = ["BulkWriteOutcome", "ItemStore", "WriteFailure", "InMemoryItemStore"]
