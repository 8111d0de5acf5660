from django.apps import AppConfig


class CalendarEventsConfig(AppConfig):
    name = "calendar_events"
    label = "calendar_events"
    verbose_name = "Calendar Events"

    def ready(self) -> None:
        from calendar_events import signals  # noqa: F401
