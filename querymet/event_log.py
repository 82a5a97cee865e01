"""Capped, append-only in-memory log of query events."""

import threading
from typing import Iterable, Tuple

from .models import QueryEvent

DEFAULT_MAX_EVENTS = 1000


class QueryEventLog:
    """
    Keeps the most recent ``max_events`` events in insertion order.

    One instance is owned by whatever composes the application (a session, a
    tenant, a process) and handed to the service explicitly. Appends and
    snapshots are serialized so a log shared between request handlers never
    loses updates.
    """

    def __init__(self, max_events: int = DEFAULT_MAX_EVENTS, events: Iterable[QueryEvent] = ()):
        if max_events <= 0:
            raise ValueError("max_events must be positive")
        self.max_events = max_events
        self._lock = threading.Lock()
        self._events: list[QueryEvent] = []
        self.replace(events)

    def append(self, event: QueryEvent) -> None:
        with self._lock:
            self._events.append(event)
            overflow = len(self._events) - self.max_events
            if overflow > 0:
                del self._events[:overflow]

    def replace(self, events: Iterable[QueryEvent]) -> None:
        """Swap the whole log for ``events``, keeping only the newest ones."""
        retained = list(events)[-self.max_events:]
        with self._lock:
            self._events = retained

    def snapshot(self) -> Tuple[QueryEvent, ...]:
        with self._lock:
            return tuple(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
