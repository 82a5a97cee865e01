"""Port definitions for persisting query events in any durable store."""

from typing import Protocol, Sequence

from .models import QueryEvent


class QueryEventStore(Protocol):
    """Store interface that adapters can implement for any backend.

    Implementations raise ``StoreError`` for every backend failure.
    """

    def append_event(self, event: QueryEvent) -> None:
        """Persist one event."""

    def load_all_events(self) -> Sequence[QueryEvent]:
        """Return stored events in the order they were recorded."""
