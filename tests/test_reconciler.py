from catalog_harvester.adapters.base import ItemRecord
from catalog_harvester.errors import DuplicateKey, StoreUnavailable
from catalog_harvester.reconcile.reconciler import Reconciler
from catalog_harvester.store.memory import InMemoryItemStore


class CountingStore(InMemoryItemStore):
    def __init__(self):
        super().__init__()
        self.lookups = 0
        self.batches = []

    def find_by_titles(self, titles):
        self.lookups += 1
        return super().find_by_titles(titles)

    def bulk_write(self, ops):
        self.batches.append(list(ops))
        return super().bulk_write(ops)


class RacingStore(InMemoryItemStore):
    """Another writer inserts the same title between our read and write."""

    def find_by_titles(self, titles):
        found = super().find_by_titles(titles)
        self.records["Raced"] = ItemRecord("Raced", "£9", 1)
        return found


class BrokenWriteStore(InMemoryItemStore):
    def bulk_write(self, ops):
        raise StoreUnavailable("connection lost")


class BrokenReadStore(InMemoryItemStore):
    def find_by_titles(self, titles):
        raise StoreUnavailable("connection lost")


ITEMS = [ItemRecord("A", "£10", 3), ItemRecord("B", "£20", 5)]


def test_first_run_inserts_everything():
    store = CountingStore()
    result = Reconciler(store).reconcile(ITEMS)
    assert (result.inserts, result.updates, result.unchanged) == (2, 0, 0)
    assert (result.inserted, result.updated) == (2, 0)
    assert result.attempted == 2
    assert store.records["B"] == ItemRecord("B", "£20", 5)
    assert store.lookups == 1
    assert len(store.batches) == 1


def test_second_identical_run_writes_nothing():
    store = CountingStore()
    Reconciler(store).reconcile(ITEMS)
    result = Reconciler(store).reconcile(ITEMS)
    assert (result.inserts, result.updates, result.inserted, result.updated) == (0, 0, 0, 0)
    assert result.unchanged == 2
    assert len(store.batches) == 1


def test_changed_item_is_updated():
    store = InMemoryItemStore()
    store.records["A"] = ItemRecord("A", "£10", 3)
    result = Reconciler(store).reconcile([ItemRecord("A", "£12", 3)])
    assert (result.updates, result.updated, result.inserts) == (1, 1, 0)
    assert store.records["A"].price == "£12"


def test_racing_duplicate_is_a_warning_not_a_crash():
    store = RacingStore()
    result = Reconciler(store).reconcile([ItemRecord("Raced", "£1", 1), ItemRecord("Fresh", "£2", 2)])
    assert result.duplicates == 1
    assert result.inserted == 1
    assert not result.aborted
    assert isinstance(result.errors[0], DuplicateKey)
    assert store.records["Fresh"].price == "£2"


def test_store_outage_on_write_aborts_run():
    result = Reconciler(BrokenWriteStore()).reconcile(ITEMS)
    assert result.aborted
    assert result.inserts == 2
    assert result.inserted == 0
    assert isinstance(result.errors[0], StoreUnavailable)


def test_store_outage_on_read_aborts_run():
    result = Reconciler(BrokenReadStore()).reconcile(ITEMS)
    assert result.aborted
    assert result.attempted == 0


def test_empty_scrape_does_not_touch_store():
    store = CountingStore()
    result = Reconciler(store).reconcile([])
    assert store.lookups == 0
    assert result.attempted == 0


class CorruptRowStore(InMemoryItemStore):
    """Returns rows the way the Mongo store decodes damaged documents."""

    def __init__(self, docs):
        super().__init__()
        self.docs = docs
        for doc in docs:
            self.records[doc["title"]] = ItemRecord.from_dict(doc)

    def find_by_titles(self, titles):
        return {doc["title"]: ItemRecord.from_dict(doc) for doc in self.docs}


def test_corrupt_persisted_rating_is_rewritten():
    store = CorruptRowStore([
        {"title": "A", "price": "£1", "rating": 7},
        {"title": "B", "price": "£2", "rating": "lots"},
    ])
    result = Reconciler(store).reconcile([ItemRecord("A", "£1", 3), ItemRecord("B", "£2", 4)])
    assert not result.aborted
    assert (result.inserts, result.updates) == (0, 2)
    assert result.updated == 2
    assert store.records["A"] == ItemRecord("A", "£1", 3)
