"""Django signal handlers for the calendar app."""

from django.core.signals import setting_changed
from django.dispatch import receiver

from calendar_events.services import reset_event_facade


@receiver(setting_changed)
def rebuild_facade_on_settings_change(sender, setting, **kwargs):
    """Drop the cached facade when a calendar setting is overridden."""
    if setting.startswith("CALENDAR_"):
        reset_event_facade()
