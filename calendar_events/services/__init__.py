"""Service wiring.

``get_event_facade`` builds the store, service and facade from Django
settings once per process and initializes the calendar document.
"""

import functools
import logging

from django.conf import settings

from calendar_events.domain.errors import DomainError
from calendar_events.services.event_service import BulkInsertResult, EventService
from calendar_events.services.facade import CalendarFacade, FacadeResponse
from calendar_events.services.id_allocator import IdAllocator
from calendar_events.stores import JsonFileEventStore

logger = logging.getLogger("calendar.events")

__all__ = [
    "BulkInsertResult",
    "CalendarFacade",
    "EventService",
    "FacadeResponse",
    "IdAllocator",
    "get_event_facade",
    "reset_event_facade",
]


@functools.lru_cache(maxsize=1)
def get_event_facade() -> CalendarFacade:
    store = JsonFileEventStore(
        settings.CALENDAR_DATA_FILE,
        lock_timeout=float(settings.CALENDAR_LOCK_TIMEOUT),
    )
    try:
        store.initialize()
    except DomainError as exc:
        # operations retry the load and report the failure themselves
        logger.error("Calendar store at %s is not usable yet: %s", store.path, exc)
    else:
        logger.info("Calendar store ready at %s", store.path)
    return CalendarFacade(EventService(store, IdAllocator()))


def reset_event_facade() -> None:
    """Forget the cached facade so the next call rebuilds it from settings."""
    get_event_facade.cache_clear()
