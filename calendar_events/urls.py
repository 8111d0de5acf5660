from django.urls import path

from calendar_events.handlers import (
    BulkEventsView,
    EventDetailView,
    EventListView,
    HealthView,
    RecurringGroupView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/bulk", BulkEventsView.as_view(), name="event-bulk"),
    path(
        "events/recurring/<str:group_id>",
        RecurringGroupView.as_view(),
        name="event-recurring-group",
    ),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("health", HealthView.as_view(), name="health"),
]
