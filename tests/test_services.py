"""Unit tests for EventService.

These test mutation semantics and domain error mapping.
Run with: pytest tests/test_services.py -v
"""

import json

import pytest

from calendar_events.domain import EventId, RecurringGroupId
from calendar_events.domain.errors import (
    DuplicateEventIdError,
    EventNotFoundError,
    ImmutableFieldError,
    StorageError,
    ValidationError,
)
from calendar_events.services import EventService, IdAllocator
from calendar_events.stores import json_store

NEW_EVENT = {"title": "X", "date": "2025-01-01", "type": "note", "description": "d"}


def persisted(data_file):
    return json.loads(data_file.read_text(encoding="utf-8"))


class TestListAll:
    """Tests for EventService.list_all."""

    def test_returns_seed_events(self, service):
        collection = service.list_all()
        assert [event.id for event in collection.events] == [EventId(1), EventId(2)]

    def test_does_not_write(self, counting_store):
        store = counting_store
        service = EventService(store)
        service.list_all()
        service.list_all()
        assert store.save_count == 1


class TestInsert:
    """Tests for EventService.insert."""

    def test_assigns_fresh_id_and_appends(self, service, data_file):
        """Starting from the seeds, one insert yields three events."""
        event = service.insert(NEW_EVENT)
        assert event.id not in {EventId(1), EventId(2)}
        document = persisted(data_file)
        assert len(document["events"]) == 3
        assert document["events"][-1] == {"id": event.id.value, **NEW_EVENT}

    def test_keeps_supplied_id(self, service):
        event = service.insert({"id": "team-sync", "title": "Sync"})
        assert event.id == EventId("team-sync")

    @pytest.mark.parametrize("falsy_id", [None, "", 0, 0.0, False])
    def test_falsy_id_is_treated_as_absent(self, service, falsy_id):
        """Null and falsy scalar ids (0, false, "") ask for a fresh one."""
        event = service.insert({"id": falsy_id, "title": "Needs id"})
        assert isinstance(event.id.value, int)
        assert event.id.value > 2

    def test_duplicate_id_is_rejected(self, service, data_file):
        service.list_all()
        before = data_file.read_bytes()
        with pytest.raises(DuplicateEventIdError):
            service.insert({"id": 1, "title": "Clash"})
        assert data_file.read_bytes() == before

    def test_non_object_is_rejected(self, service):
        with pytest.raises(ValidationError):
            service.insert(["not", "an", "event"])

    def test_bumps_last_updated(self, service):
        before = service.list_all().last_updated
        service.insert(NEW_EVENT)
        assert service.list_all().last_updated >= before

    def test_many_inserts_have_unique_ids(self, store):
        """Inserts within one frozen clock tick still get distinct ids."""
        service = EventService(store, IdAllocator(clock_ns=lambda: 1_735_084_800_000_000_000))
        for index in range(50):
            service.insert({"title": f"Event {index}"})
        ids = [event.id for event in service.list_all().events]
        assert len(ids) == len(set(ids)) == 52


class TestBulkInsert:
    """Tests for EventService.bulk_insert."""

    def test_adds_all_and_reports_ids(self, service):
        result = service.bulk_insert([{"title": "A"}, {"title": "B", "id": 500}, {"title": "C"}])
        assert result.added_count == 3
        assert result.ids[1] == EventId(500)
        assert len(set(result.ids)) == 3
        titles = [event.title for event in service.list_all().events]
        assert titles[-3:] == ["A", "B", "C"]

    def test_empty_list_is_allowed(self, service):
        result = service.bulk_insert([])
        assert result.added_count == 0
        assert result.ids == ()

    def test_repeated_id_in_batch_is_rejected(self, service):
        service.list_all()
        with pytest.raises(DuplicateEventIdError):
            service.bulk_insert([{"id": 50}, {"id": 50}])
        assert len(service.list_all().events) == 2

    def test_payload_must_be_a_list_of_objects(self, service):
        """Malformed bulk payloads raise ValidationError before touching storage."""
        with pytest.raises(ValidationError):
            service.bulk_insert({"events": []})
        with pytest.raises(ValidationError):
            service.bulk_insert("events")
        with pytest.raises(ValidationError):
            service.bulk_insert([{"title": "ok"}, 3])


class TestUpdate:
    """Tests for EventService.update."""

    def test_changes_only_given_fields(self, service):
        event = service.update(EventId(1), {"title": "Renamed", "color": "green"})
        assert event.title == "Renamed"
        assert event.date == "2024-12-25"
        assert event.description == "Year-end reflection and 2025 goals"
        assert event.extra == {"color": "green"}
        assert service.list_all().events[0] == event

    def test_preserves_position(self, service):
        service.update(EventId(1), {"title": "Renamed"})
        assert [event.id for event in service.list_all().events] == [EventId(1), EventId(2)]

    def test_missing_event_leaves_document_unchanged(self, service, data_file):
        """NotFound is raised and the file stays byte-for-byte identical."""
        service.list_all()
        before = data_file.read_bytes()
        with pytest.raises(EventNotFoundError):
            service.update(EventId(404), {"title": "Ghost"})
        assert data_file.read_bytes() == before

    def test_same_id_in_partial_is_accepted(self, service):
        event = service.update(EventId(2), {"id": 2, "title": "Same"})
        assert event.id == EventId(2)

    def test_different_id_is_rejected(self, service):
        with pytest.raises(ImmutableFieldError):
            service.update(EventId(2), {"id": 3})

    def test_group_can_be_reassigned(self, service):
        event = service.update(EventId(2), {"recurringGroup": 8})
        assert event.recurring_group == RecurringGroupId(8)


class TestDeleteById:
    """Tests for EventService.delete_by_id."""

    def test_removes_and_returns_event(self, service):
        removed = service.delete_by_id(EventId(1))
        assert removed.title == "Weekly Newsletter #47"
        assert [event.id for event in service.list_all().events] == [EventId(2)]

    def test_missing_event_raises_not_found(self, service):
        with pytest.raises(EventNotFoundError):
            service.delete_by_id(EventId(404))

    def test_retry_after_success_is_distinguishable(self, service):
        service.delete_by_id(EventId(2))
        with pytest.raises(EventNotFoundError):
            service.delete_by_id(EventId(2))


class TestDeleteByGroup:
    """Tests for EventService.delete_by_group."""

    def test_removes_exactly_the_group(self, service):
        service.bulk_insert(
            [
                {"title": "Weekly 1", "recurringGroup": 7},
                {"title": "Monthly", "recurringGroup": 8},
                {"title": "Weekly 2", "recurringGroup": 7},
            ]
        )
        removed = service.delete_by_group(RecurringGroupId(7))
        assert removed == 2
        titles = [event.title for event in service.list_all().events]
        assert titles == ["Weekly Newsletter #47", "Live Q&A Session", "Monthly"]

    def test_unknown_group_removes_nothing(self, service):
        assert service.delete_by_group(RecurringGroupId(999)) == 0
        assert len(service.list_all().events) == 2

    def test_string_path_value_matches_numeric_tag(self, service):
        service.insert({"title": "Series", "recurringGroup": 1735084800123})
        assert service.delete_by_group(RecurringGroupId.from_string("1735084800123")) == 1


class TestStorageFailures:
    """Failed saves surface as StorageError and keep the prior document."""

    def test_insert_with_failing_save(self, service, data_file, monkeypatch):
        service.list_all()
        before = data_file.read_bytes()

        def refuse(*args, **kwargs):
            raise OSError("read-only file system")

        monkeypatch.setattr(json_store.os, "replace", refuse)
        with pytest.raises(StorageError):
            service.insert(NEW_EVENT)
        monkeypatch.undo()

        assert data_file.read_bytes() == before
        assert len(service.list_all().events) == 2

    def test_lock_is_released_after_failure(self, service):
        with pytest.raises(EventNotFoundError):
            service.delete_by_id(EventId(404))
        assert service.insert(NEW_EVENT).title == "X"
