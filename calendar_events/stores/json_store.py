"""JSON file implementation of the EventStore.

The calendar lives in one pretty-printed JSON document. Saves go to a
temporary file in the same directory, are fsynced, and are then promoted
with ``os.replace`` so readers only ever see a complete document.
"""

import json
import logging
import os
import stat
import tempfile
from contextlib import AbstractContextManager
from pathlib import Path

from calendar_events.domain import EventCollection, seed_collection
from calendar_events.domain.errors import InvalidEventError, StorageError
from calendar_events.stores.interfaces import EventStore
from calendar_events.stores.locking import DocumentLock

logger = logging.getLogger("calendar.store")

# mkstemp creates 0600 files; a fresh document gets the usual rw-r--r--
DEFAULT_MODE = 0o644


class JsonFileEventStore(EventStore):
    """File-backed store for the single calendar document."""

    def __init__(self, path: str | os.PathLike[str], lock_timeout: float = 5.0) -> None:
        self._path = Path(path)
        self._lock = DocumentLock.for_path(self._path, lock_timeout)

    @property
    def path(self) -> Path:
        return self._path

    def writer_lock(self) -> AbstractContextManager[None]:
        return self._lock

    def load(self) -> EventCollection:
        collection = self._read()
        if collection is not None:
            return collection
        with self._lock:
            # another writer may have seeded while we waited
            collection = self._read()
            if collection is None:
                collection = seed_collection()
                self.save(collection)
                logger.info("Initialized calendar document at %s", self._path)
            return collection

    def save(self, collection: EventCollection) -> None:
        directory = self._path.parent
        try:
            payload = json.dumps(collection.to_document(), indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.error("Calendar document is not serializable: %s", exc)
            raise StorageError("Failed to save events") from exc

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=directory, prefix=f".{self._path.name}.", suffix=".tmp"
            )
        except OSError as exc:
            logger.error("Cannot create temporary file in %s: %s", directory, exc)
            raise StorageError("Failed to save events") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, self._document_mode())
            os.replace(tmp_name, self._path)
        except OSError as exc:
            logger.error("Failed to write calendar document %s: %s", self._path, exc)
            _discard(tmp_name)
            raise StorageError("Failed to save events") from exc
        except BaseException:
            _discard(tmp_name)
            raise

        _sync_directory(directory)
        logger.debug("Saved %d events to %s", len(collection.events), self._path)

    def _document_mode(self) -> int:
        """Mode for the next document: the current one's, else DEFAULT_MODE."""
        try:
            return stat.S_IMODE(self._path.stat().st_mode)
        except FileNotFoundError:
            return DEFAULT_MODE

    def _read(self) -> EventCollection | None:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            logger.error("Calendar document %s is not valid UTF-8: %s", self._path, exc)
            raise StorageError("Failed to read events") from exc
        except OSError as exc:
            logger.error("Failed to read calendar document %s: %s", self._path, exc)
            raise StorageError("Failed to read events") from exc

        try:
            return EventCollection.from_document(json.loads(raw))
        except (json.JSONDecodeError, InvalidEventError) as exc:
            logger.error("Calendar document %s is corrupt: %s", self._path, exc)
            raise StorageError("Failed to read events") from exc


def _discard(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove temporary file %s: %s", path, exc)


def _sync_directory(directory: Path) -> None:
    """Persist the rename itself. Not every platform can open a directory."""
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError:
        return
    try:
        os.fsync(fd)
    except OSError as exc:
        logger.warning("Could not fsync directory %s: %s", directory, exc)
    finally:
        os.close(fd)
