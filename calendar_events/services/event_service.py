"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every mutation runs one load -> apply -> save cycle while holding the
store's writer lock, so two concurrent cycles can never both start from
the same stale snapshot.
"""

import logging
from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from calendar_events.domain import Event, EventCollection, EventId, RecurringGroupId
from calendar_events.domain.errors import (
    DuplicateEventIdError,
    EventNotFoundError,
    ImmutableFieldError,
    InvalidEventIdError,
    ValidationError,
)
from calendar_events.domain.models import ID_KEY, is_missing
from calendar_events.services.id_allocator import IdAllocator
from calendar_events.stores.interfaces import EventStore

logger = logging.getLogger("calendar.events")


@dataclass(frozen=True)
class BulkInsertResult:
    """Outcome of a bulk insert."""

    added_count: int
    ids: tuple[EventId, ...]


class EventService:
    """Applies one logical mutation per call to the stored calendar."""

    def __init__(self, store: EventStore, allocator: IdAllocator | None = None) -> None:
        self._store = store
        self._allocator = allocator or IdAllocator()

    def list_all(self) -> EventCollection:
        """Return the current collection. Takes no lock and writes nothing."""
        return self._store.load()

    def insert(self, record: Mapping[str, Any]) -> Event:
        """Append one event, allocating an id when none is supplied.

        Raises:
            ValidationError: If the record is malformed or its id is taken.
            StorageError: If the calendar cannot be loaded, locked or saved.
        """
        _require_record(record)
        with self._store.writer_lock():
            snapshot = self._store.load()
            event = self._prepare(record, snapshot.ids())
            self._store.save(snapshot.replace_events((*snapshot.events, event)))
        logger.info("Inserted event %s", event.id)
        return event

    def bulk_insert(self, records: Sequence[Mapping[str, Any]]) -> BulkInsertResult:
        """Append several events in one save.

        Raises:
            ValidationError: If ``records`` is not a list of objects, or an id
                is taken or repeated within the batch.
            StorageError: If the calendar cannot be loaded, locked or saved.
        """
        if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Sequence):
            raise ValidationError("Bulk payload must be a list of events")
        for record in records:
            _require_record(record)

        with self._store.writer_lock():
            snapshot = self._store.load()
            taken = snapshot.ids()
            added = []
            for record in records:
                event = self._prepare(record, taken)
                taken.add(event.id)
                added.append(event)
            self._store.save(snapshot.replace_events((*snapshot.events, *added)))
        logger.info("Inserted %d events in bulk", len(added))
        return BulkInsertResult(added_count=len(added), ids=tuple(event.id for event in added))

    def update(self, event_id: EventId, partial: Mapping[str, Any]) -> Event:
        """Shallow-merge ``partial`` onto the stored event.

        Fields present in ``partial`` replace the stored values, everything
        else is kept. ``recurringGroup`` may be reassigned; ``id`` may not.

        Raises:
            EventNotFoundError: If no event has ``event_id``.
            ImmutableFieldError: If ``partial`` carries a different id.
            ValidationError: If the merged record is malformed.
            StorageError: If the calendar cannot be loaded, locked or saved.
        """
        _require_record(partial)
        changes = dict(partial)
        if not is_missing(changes.get(ID_KEY)):
            try:
                requested = EventId(changes[ID_KEY])
            except ValueError:
                raise InvalidEventIdError() from None
            if requested != event_id:
                raise ImmutableFieldError(ID_KEY)
        changes.pop(ID_KEY, None)

        with self._store.writer_lock():
            snapshot = self._store.load()
            index = snapshot.find(event_id)
            if index is None:
                logger.warning("Update of missing event %s", event_id)
                raise EventNotFoundError(event_id.value)
            merged = snapshot.events[index].merged(changes)
            events = list(snapshot.events)
            events[index] = merged
            self._store.save(snapshot.replace_events(events))
        logger.info("Updated event %s (%s)", event_id, ", ".join(sorted(changes)) or "no fields")
        return merged

    def delete_by_id(self, event_id: EventId) -> Event:
        """Remove one event and return it.

        Raises:
            EventNotFoundError: If no event has ``event_id``.
            StorageError: If the calendar cannot be loaded, locked or saved.
        """
        with self._store.writer_lock():
            snapshot = self._store.load()
            index = snapshot.find(event_id)
            if index is None:
                logger.warning("Delete of missing event %s", event_id)
                raise EventNotFoundError(event_id.value)
            removed = snapshot.events[index]
            remaining = snapshot.events[:index] + snapshot.events[index + 1 :]
            self._store.save(snapshot.replace_events(remaining))
        logger.info("Deleted event %s", event_id)
        return removed

    def delete_by_group(self, group_id: RecurringGroupId) -> int:
        """Remove every event tagged with ``group_id`` and return how many went.

        A group with no members is not an error; the result is then 0.
        """
        with self._store.writer_lock():
            snapshot = self._store.load()
            remaining = [event for event in snapshot.events if event.recurring_group != group_id]
            removed_count = len(snapshot.events) - len(remaining)
            self._store.save(snapshot.replace_events(remaining))
        logger.info("Deleted %d events in recurring group %s", removed_count, group_id)
        return removed_count

    def _prepare(self, record: Mapping[str, Any], taken: Collection[EventId]) -> Event:
        if is_missing(record.get(ID_KEY)):
            event_id = self._allocator.allocate(taken)
            return Event.from_record({**record, ID_KEY: event_id.value})
        event = Event.from_record(record)
        if event.id in taken:
            raise DuplicateEventIdError(event.id.value)
        return event


def _require_record(record: Any) -> None:
    if not isinstance(record, Mapping):
        raise ValidationError("Event must be an object")
