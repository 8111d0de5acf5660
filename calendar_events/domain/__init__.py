from calendar_events.domain.models import Event, EventCollection, seed_collection
from calendar_events.domain.value_objects import EventId, RecurringGroupId, Timestamp

__all__ = [
    "Event",
    "EventCollection",
    "seed_collection",
    "EventId",
    "RecurringGroupId",
    "Timestamp",
]
