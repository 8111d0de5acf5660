"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from calendar_events.services import EventService, IdAllocator, reset_event_facade
from calendar_events.stores import InMemoryEventStore, JsonFileEventStore


class CountingStore(InMemoryEventStore):
    """In-memory store that records how many times it was saved."""

    def __init__(self, *args, **kwargs) -> None:
        self.save_count = 0
        super().__init__(*args, **kwargs)

    def save(self, collection):
        self.save_count += 1
        super().save(collection)


@pytest.fixture
def counting_store() -> CountingStore:
    return CountingStore()


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "calendar-data.json"


@pytest.fixture
def store(data_file) -> JsonFileEventStore:
    return JsonFileEventStore(data_file, lock_timeout=2.0)


@pytest.fixture
def service(store) -> EventService:
    return EventService(store, IdAllocator())


@pytest.fixture(autouse=True)
def calendar_settings(settings, data_file):
    """Point the app at a per-test document and drop any cached facade."""
    settings.CALENDAR_DATA_FILE = data_file
    settings.CALENDAR_LOCK_TIMEOUT = 2.0
    reset_event_facade()
    yield
    reset_event_facade()
