"""Identifier allocation for new events."""

import threading
import time
from collections.abc import Callable, Collection

from calendar_events.domain import EventId

# Room for this many allocations per clock millisecond before ids run ahead of the clock.
SEQUENCE_SPAN = 1000


class IdAllocator:
    """Hands out integer ids derived from the clock plus a sequence number.

    Ids are ``epoch_ms * SEQUENCE_SPAN + sequence``. Successive ids from one
    allocator strictly increase, so a burst inside a single clock tick still
    yields distinct values. Each candidate is checked against the ids the
    caller says are taken before it is returned.
    """

    def __init__(self, clock_ns: Callable[[], int] = time.time_ns) -> None:
        self._clock_ns = clock_ns
        self._last = 0
        self._guard = threading.Lock()

    def allocate(self, taken: Collection[EventId]) -> EventId:
        """Return an id that is not in ``taken``.

        ``taken`` should hold the live snapshot's ids plus any ids already
        handed out for the batch being built.
        """
        with self._guard:
            candidate = max(self._clock_ns() // 1_000_000 * SEQUENCE_SPAN, self._last + 1)
            while EventId(candidate) in taken:
                candidate += 1
            self._last = candidate
            return EventId(candidate)
