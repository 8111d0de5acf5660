"""Domain primitives that enforce validity at creation time."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Self

Scalar = int | float | str


def _parse_scalar(value: str) -> Scalar:
    text = value.strip()
    if not text:
        raise ValueError("Identifier cannot be empty")
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return text
    if not math.isfinite(number):
        return text
    return int(number) if number.is_integer() else number


def _check_scalar(value: object) -> None:
    # bool is an int subclass but never a usable identifier
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError("Identifier must be a number or a string")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("Identifier must be finite")
    if isinstance(value, str) and not value:
        raise ValueError("Identifier cannot be empty")


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: Scalar

    def __post_init__(self) -> None:
        _check_scalar(self.value)

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_scalar(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RecurringGroupId:
    """Tag shared by the events of one recurring series."""

    value: Scalar

    def __post_init__(self) -> None:
        _check_scalar(self.value)

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_scalar(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class Timestamp:
    """UTC instant rendered the way JavaScript's toISOString() does."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None:
            raise ValueError("Timestamp must be timezone-aware")

    @classmethod
    def now(cls) -> Self:
        current = datetime.now(timezone.utc)
        # persisted precision is milliseconds
        return cls(value=current.replace(microsecond=current.microsecond // 1000 * 1000))

    @classmethod
    def parse(cls, value: str) -> Self:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return cls(value=parsed.astimezone(timezone.utc))

    @classmethod
    def advance(cls, previous: "Timestamp | None") -> Self:
        """Return the current time, never earlier than ``previous``."""
        current = cls.now()
        if previous is not None and previous.value > current.value:
            return cls(value=previous.value)
        return current

    def isoformat(self) -> str:
        utc = self.value.astimezone(timezone.utc)
        return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"

    def __str__(self) -> str:
        return self.isoformat()
