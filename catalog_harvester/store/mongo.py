from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pymongo import ASCENDING, InsertOne, MongoClient, UpdateOne
from pymongo.collection import Collection
from pymongo.errors import BulkWriteError, PyMongoError

from .base import BulkWriteOutcome, WriteFailure
from ..adapters.base import ItemRecord
from ..errors import StoreUnavailable
from ..reconcile.diff import Insert, WriteOp

logger = logging.getLogger(__name__)

_PROJECTION = {"_id": 0, "title": 1, "price": 1, "rating": 1}


class MongoItemStore:
    """
    Items kept in one MongoDB collection, one document per title.
    """

    def __init__(
        self,
        uri: str,
        database: Optional[str] = None,
        collection: str = "books",
        *,
        timeout_ms: int = 2000,
        client: Optional[MongoClient] = None,
    ) -> None:
        self.client = client or MongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
        db = self.client[database] if database else self.client.get_default_database()
        self.collection: Collection = db[collection]

    @classmethod
    def from_config(cls, config: Any) -> "MongoItemStore":
        return cls(
            config.mongo_uri,
            config.mongo_database,
            config.mongo_collection,
            timeout_ms=config.mongo_timeout_ms,
        )

    def ping(self) -> None:
        try:
            self.client.admin.command("ping")
        except PyMongoError as exc:
            raise StoreUnavailable(f"cannot reach MongoDB: {exc}") from exc
        logger.info("Connected to MongoDB")

    def ensure_indexes(self) -> None:
        try:
            self.collection.create_index([("title", ASCENDING)], unique=True)
        except PyMongoError as exc:
            raise StoreUnavailable(f"cannot create title index: {exc}") from exc

    def find_by_titles(self, titles: Iterable[str]) -> Dict[str, ItemRecord]:
        wanted = list(dict.fromkeys(titles))
        if not wanted:
            return {}
        try:
            docs = list(self.collection.find({"title": {"$in": wanted}}, _PROJECTION))
        except PyMongoError as exc:
            raise StoreUnavailable(f"lookup failed: {exc}") from exc
        return {doc["title"]: ItemRecord.from_dict(doc) for doc in docs}

    def bulk_write(self, ops: Sequence[WriteOp]) -> BulkWriteOutcome:
        if not ops:
            return BulkWriteOutcome()
        requests = [self._to_request(op) for op in ops]
        try:
            result = self.collection.bulk_write(requests, ordered=False)
        except BulkWriteError as exc:
            return self._outcome_from_error(ops, exc.details)
        except PyMongoError as exc:
            raise StoreUnavailable(f"bulk write failed: {exc}") from exc
        return BulkWriteOutcome(inserted=result.inserted_count, updated=result.modified_count)

    def close(self) -> None:
        self.client.close()

    # ---- helpers ------------------------------------------------------------

    @staticmethod
    def _to_request(op: WriteOp):
        doc = op.item.to_dict()
        if isinstance(op, Insert):
            return InsertOne(doc)
        return UpdateOne({"title": op.item.title}, {"$set": doc})

    @staticmethod
    def _outcome_from_error(ops: Sequence[WriteOp], details: Dict[str, Any]) -> BulkWriteOutcome:
        failures: List[WriteFailure] = []
        for err in details.get("writeErrors", []):
            index = err.get("index", 0)
            failures.append(
                WriteFailure(
                    index=index,
                    op=ops[index],
                    code=err.get("code"),
                    message=err.get("errmsg", ""),
                )
            )
        for err in details.get("writeConcernErrors", []):
            logger.warning("Write concern error: %s", err.get("errmsg", err))
        return BulkWriteOutcome(
            inserted=details.get("nInserted", 0),
            updated=details.get("nModified", 0),
            failures=failures,
        )
