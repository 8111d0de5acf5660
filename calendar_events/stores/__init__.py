from calendar_events.stores.interfaces import EventStore
from calendar_events.stores.json_store import JsonFileEventStore
from calendar_events.stores.locking import DocumentLock
from calendar_events.stores.memory_store import InMemoryEventStore

__all__ = [
    "EventStore",
    "JsonFileEventStore",
    "InMemoryEventStore",
    "DocumentLock",
]
