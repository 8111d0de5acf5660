"""Domain error codes for the calendar events module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT = "INVALID_EVENT"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    DUPLICATE_EVENT_ID = "DUPLICATE_EVENT_ID"
    IMMUTABLE_FIELD = "IMMUTABLE_FIELD"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    LOCK_TIMEOUT = "LOCK_TIMEOUT"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when no event carries the requested identifier."""

    def __init__(self, event_id: object) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class ValidationError(DomainError):
    """Raised when input has the wrong shape."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_EVENT) -> None:
        super().__init__(code=code, message=message)


class InvalidEventError(ValidationError):
    """Raised when an event record cannot be interpreted."""

    def __init__(self, message: str = "Invalid event payload") -> None:
        super().__init__(message)


class InvalidEventIdError(ValidationError):
    """Raised when an identifier is not a usable scalar."""

    def __init__(self) -> None:
        super().__init__("Invalid event ID format", code=ErrorCode.INVALID_EVENT_ID)


class DuplicateEventIdError(ValidationError):
    """Raised when a supplied identifier is already taken."""

    def __init__(self, event_id: object) -> None:
        super().__init__("Event ID already exists", code=ErrorCode.DUPLICATE_EVENT_ID)
        self.event_id = event_id


class ImmutableFieldError(ValidationError):
    """Raised when an update tries to change a field that is fixed for life."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"Field '{field_name}' cannot be changed", code=ErrorCode.IMMUTABLE_FIELD)
        self.field_name = field_name


class StorageError(DomainError):
    """Raised when the document cannot be read, written or locked."""

    def __init__(
        self,
        message: str = "Calendar storage is unavailable",
        code: ErrorCode = ErrorCode.STORAGE_FAILURE,
    ) -> None:
        super().__init__(code=code, message=message)


class LockTimeoutError(StorageError):
    """Raised when the document writer lock is not acquired in time."""

    def __init__(self) -> None:
        super().__init__("Calendar storage is busy, try again", code=ErrorCode.LOCK_TIMEOUT)


class ConflictError(DomainError):
    """Reserved for optimistic concurrency.

    Mutations are serialized by the document lock, so nothing raises this today.
    """

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.CONFLICT, message="Calendar changed concurrently")
