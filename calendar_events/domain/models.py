"""Domain models representing persisted state.

These are pure domain objects. The on-disk JSON layout is produced by
``to_record`` / ``to_document`` and read back by ``from_record`` /
``from_document``; stores never build these dictionaries by hand.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Self

from calendar_events.domain.errors import InvalidEventError
from calendar_events.domain.value_objects import EventId, RecurringGroupId, Timestamp

ID_KEY = "id"
GROUP_KEY = "recurringGroup"

# record key -> Event attribute
_KNOWN_FIELDS = {
    "title": "title",
    "date": "date",
    "type": "event_type",
    "description": "description",
}


def is_missing(value: Any) -> bool:
    """True for ids that mean "allocate one": null and falsy scalars (0, false, "")."""
    return value is None or (isinstance(value, (bool, int, float, str)) and not value)


@dataclass(frozen=True)
class Event:
    """Domain representation of a calendar Event."""

    id: EventId
    title: Any = None
    date: Any = None
    event_type: Any = None
    description: Any = None
    recurring_group: RecurringGroupId | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Self:
        """Build an Event from its persisted JSON object.

        Raises:
            InvalidEventError: If the record is not a mapping or its id or
                group tag is not a usable identifier.
        """
        if not isinstance(record, Mapping):
            raise InvalidEventError("Event must be an object")
        try:
            event_id = EventId(record[ID_KEY])
        except KeyError:
            raise InvalidEventError("Event is missing an id") from None
        except ValueError:
            raise InvalidEventError("Event id must be a number or a string") from None

        group = record.get(GROUP_KEY)
        try:
            recurring_group = None if group is None else RecurringGroupId(group)
        except ValueError:
            raise InvalidEventError("recurringGroup must be a number or a string") from None

        known = {attr: record.get(key) for key, attr in _KNOWN_FIELDS.items()}
        extra = {
            key: value
            for key, value in record.items()
            if key not in _KNOWN_FIELDS and key not in (ID_KEY, GROUP_KEY)
        }
        return cls(id=event_id, recurring_group=recurring_group, extra=extra, **known)

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {ID_KEY: self.id.value}
        for key, attr in _KNOWN_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                record[key] = value
        if self.recurring_group is not None:
            record[GROUP_KEY] = self.recurring_group.value
        record.update(self.extra)
        return record

    def merged(self, partial: Mapping[str, Any]) -> "Event":
        """Return a copy with ``partial`` shallow-merged over this event."""
        return Event.from_record({**self.to_record(), **partial})


@dataclass(frozen=True)
class EventCollection:
    """The whole calendar: ordered events plus the time of the last change."""

    events: tuple[Event, ...]
    last_updated: Timestamp

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> Self:
        if not isinstance(document, Mapping):
            raise InvalidEventError("Calendar document must be an object")
        records = document.get("events", [])
        if not isinstance(records, list):
            raise InvalidEventError("Calendar events must be a list")
        raw_updated = document.get("lastUpdated")
        if raw_updated is not None and not isinstance(raw_updated, str):
            raise InvalidEventError("Calendar lastUpdated is not a timestamp")
        try:
            last_updated = Timestamp.parse(raw_updated) if raw_updated else Timestamp.now()
        except (TypeError, ValueError):
            raise InvalidEventError("Calendar lastUpdated is not a timestamp") from None
        return cls(
            events=tuple(Event.from_record(record) for record in records),
            last_updated=last_updated,
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "events": [event.to_record() for event in self.events],
            "lastUpdated": self.last_updated.isoformat(),
        }

    def ids(self) -> set[EventId]:
        return {event.id for event in self.events}

    def find(self, event_id: EventId) -> int | None:
        """Return the position of the event with ``event_id``, or None."""
        for index, event in enumerate(self.events):
            if event.id == event_id:
                return index
        return None

    def replace_events(self, events: Iterable[Event]) -> "EventCollection":
        """Return the next snapshot holding ``events`` with a fresh lastUpdated."""
        return EventCollection(
            events=tuple(events),
            last_updated=Timestamp.advance(self.last_updated),
        )


SEED_RECORDS: tuple[dict[str, Any], ...] = (
    {
        "id": 1,
        "title": "Weekly Newsletter #47",
        "date": "2024-12-25",
        "type": "newsletter",
        "description": "Year-end reflection and 2025 goals",
    },
    {
        "id": 2,
        "title": "Live Q&A Session",
        "date": "2024-12-28",
        "type": "webinar",
        "description": "Answering subscriber questions",
    },
)


def seed_collection() -> EventCollection:
    """Return the sample calendar written when no document exists yet."""
    return EventCollection(
        events=tuple(Event.from_record(record) for record in SEED_RECORDS),
        last_updated=Timestamp.now(),
    )
