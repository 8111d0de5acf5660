from calendar_events.handlers.views import (
    BulkEventsView,
    EventDetailView,
    EventListView,
    HealthView,
    RecurringGroupView,
)

__all__ = [
    "BulkEventsView",
    "EventDetailView",
    "EventListView",
    "HealthView",
    "RecurringGroupView",
]
