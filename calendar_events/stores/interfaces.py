"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from calendar_events.domain import EventCollection


class EventStore(ABC):
    """Interface for persisting the whole calendar as one document."""

    @abstractmethod
    def load(self) -> EventCollection:
        """Return the current collection, seeding and saving it first if absent.

        Raises:
            StorageError: If the document cannot be read.
        """
        ...

    @abstractmethod
    def save(self, collection: EventCollection) -> None:
        """Atomically replace the stored document with ``collection``.

        Readers observe either the previous or the new document, never a mix.

        Raises:
            StorageError: If the write cannot be completed and committed.
        """
        ...

    @abstractmethod
    def writer_lock(self) -> AbstractContextManager[None]:
        """Return the lock that serializes load-mutate-save cycles on this document.

        Raises:
            LockTimeoutError: On entry, if the lock is not acquired in time.
        """
        ...

    def initialize(self) -> EventCollection:
        """Make sure the document exists. Called once at service start."""
        return self.load()
