"""
Calendar Sync Root URL Configuration
Thin adapter routes only.
"""

from django.urls import include, path

urlpatterns = [
    path("api/", include("calendar_events.urls")),
]
