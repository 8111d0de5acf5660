"""Per-document writer lock with a bounded wait."""

import logging
import threading
from pathlib import Path
from types import TracebackType

from calendar_events.domain.errors import LockTimeoutError

logger = logging.getLogger("calendar.store")

_registry: dict[str, threading.RLock] = {}
_registry_guard = threading.Lock()


def _shared_lock(key: str) -> threading.RLock:
    with _registry_guard:
        lock = _registry.get(key)
        if lock is None:
            lock = _registry[key] = threading.RLock()
        return lock


class DocumentLock:
    """Reentrant lock shared by every store instance pointing at one document.

    Re-entry from the holding thread is allowed so ``load`` can seed a
    missing document while a mutation already holds the lock.
    """

    def __init__(self, lock: threading.RLock, timeout: float, name: str = "") -> None:
        self._lock = lock
        self._timeout = timeout
        self._name = name

    @classmethod
    def for_path(cls, path: Path, timeout: float) -> "DocumentLock":
        key = str(Path(path).resolve())
        return cls(_shared_lock(key), timeout, name=key)

    @classmethod
    def private(cls, timeout: float, name: str = "memory") -> "DocumentLock":
        return cls(threading.RLock(), timeout, name=name)

    def __enter__(self) -> None:
        if not self._lock.acquire(timeout=self._timeout):
            logger.warning("Timed out after %.2fs waiting for lock on %s", self._timeout, self._name)
            raise LockTimeoutError()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._lock.release()
