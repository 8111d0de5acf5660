"""In-memory EventStore, used where no file should be touched."""

from contextlib import AbstractContextManager

from calendar_events.domain import EventCollection, seed_collection
from calendar_events.stores.interfaces import EventStore
from calendar_events.stores.locking import DocumentLock


class InMemoryEventStore(EventStore):
    """Keeps the latest snapshot in a field. Snapshots are immutable, so
    swapping the reference is already atomic for readers."""

    def __init__(self, collection: EventCollection | None = None, lock_timeout: float = 5.0) -> None:
        self._collection = collection
        self._lock = DocumentLock.private(lock_timeout)

    def writer_lock(self) -> AbstractContextManager[None]:
        return self._lock

    def load(self) -> EventCollection:
        if self._collection is None:
            with self._lock:
                if self._collection is None:
                    self.save(seed_collection())
        return self._collection

    def save(self, collection: EventCollection) -> None:
        self._collection = collection
