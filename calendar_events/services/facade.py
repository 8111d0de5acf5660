"""Service facade - the boundary consumed by the transport layer.

The facade turns already-parsed requests into EventService calls and
folds every outcome into one response shape:

    {"success": true, ...payload}
    {"success": false, "error": "<user-safe message>"}

Domain errors keep their own user-safe message. Anything else is logged
with its traceback and reported with the operation's generic message.
"""

import functools
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from calendar_events.domain import EventId, RecurringGroupId, Timestamp
from calendar_events.domain.errors import DomainError, ErrorCode, InvalidEventIdError
from calendar_events.services.event_service import EventService

logger = logging.getLogger("calendar.events")


@dataclass(frozen=True)
class FacadeResponse:
    """Uniform result of one facade operation."""

    success: bool
    payload: dict[str, Any] = field(default_factory=dict)
    error_code: ErrorCode | None = None

    @classmethod
    def ok(cls, **payload: Any) -> "FacadeResponse":
        return cls(success=True, payload=payload)

    @classmethod
    def failure(cls, code: ErrorCode, message: str) -> "FacadeResponse":
        return cls(success=False, payload={"error": message}, error_code=code)

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, **self.payload}


def _operation(failure_message: str) -> Callable:
    """Map exceptions raised by a facade method into failure responses."""

    def decorator(method: Callable[..., FacadeResponse]) -> Callable[..., FacadeResponse]:
        @functools.wraps(method)
        def wrapper(self: "CalendarFacade", *args: Any, **kwargs: Any) -> FacadeResponse:
            try:
                return method(self, *args, **kwargs)
            except DomainError as exc:
                logger.info("%s rejected: %s", method.__name__, exc)
                return FacadeResponse.failure(exc.code, exc.message)
            except Exception:
                logger.exception("%s failed unexpectedly", method.__name__)
                return FacadeResponse.failure(ErrorCode.STORAGE_FAILURE, failure_message)

        return wrapper

    return decorator


def _parse_event_id(raw: str | EventId) -> EventId:
    if isinstance(raw, EventId):
        return raw
    try:
        return EventId.from_string(str(raw))
    except ValueError:
        raise InvalidEventIdError() from None


def _parse_group_id(raw: str | RecurringGroupId) -> RecurringGroupId:
    if isinstance(raw, RecurringGroupId):
        return raw
    try:
        return RecurringGroupId.from_string(str(raw))
    except ValueError:
        raise InvalidEventIdError() from None


class CalendarFacade:
    """Operations offered to the transport layer."""

    def __init__(self, service: EventService) -> None:
        self._service = service

    @_operation("Failed to read events")
    def list_events(self) -> FacadeResponse:
        collection = self._service.list_all()
        return FacadeResponse.ok(
            events=[event.to_record() for event in collection.events],
            lastUpdated=collection.last_updated.isoformat(),
        )

    @_operation("Failed to add event")
    def create_event(self, record: Mapping[str, Any]) -> FacadeResponse:
        event = self._service.insert(record)
        return FacadeResponse.ok(event=event.to_record(), message="Event added successfully")

    @_operation("Failed to update event")
    def update_event(self, event_id: str | EventId, partial: Mapping[str, Any]) -> FacadeResponse:
        event = self._service.update(_parse_event_id(event_id), partial)
        return FacadeResponse.ok(event=event.to_record(), message="Event updated successfully")

    @_operation("Failed to delete event")
    def delete_event(self, event_id: str | EventId) -> FacadeResponse:
        event = self._service.delete_by_id(_parse_event_id(event_id))
        return FacadeResponse.ok(event=event.to_record(), message="Event deleted successfully")

    @_operation("Failed to delete recurring events")
    def delete_event_group(self, group_id: str | RecurringGroupId) -> FacadeResponse:
        removed = self._service.delete_by_group(_parse_group_id(group_id))
        return FacadeResponse.ok(
            removedCount=removed,
            message=f"{removed} recurring events deleted successfully",
        )

    @_operation("Failed to add bulk events")
    def bulk_create_events(self, records: Sequence[Mapping[str, Any]]) -> FacadeResponse:
        result = self._service.bulk_insert(records)
        return FacadeResponse.ok(
            addedCount=result.added_count,
            ids=[event_id.value for event_id in result.ids],
            message=f"{result.added_count} events added successfully",
        )

    def health_check(self) -> FacadeResponse:
        return FacadeResponse.ok(
            message="Calendar sync server is running",
            timestamp=Timestamp.now().isoformat(),
        )
