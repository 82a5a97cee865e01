"""Application service orchestrating the event log, the store and pure analytics."""

import logging
import time
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional

from .analytics import compute_dashboard_stats, dashboard_chart
from .config import AnalyticsSettings
from .event_log import QueryEventLog
from .models import QueryEvent
from .ports import QueryEventStore

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Facade service that records query events and serves dashboard statistics.

    The local log is the source of truth for every computation. The store, when
    given, is a best-effort mirror: its failures are logged and never raised.
    """

    def __init__(
        self,
        log: Optional[QueryEventLog] = None,
        store: Optional[QueryEventStore] = None,
        settings: Optional[AnalyticsSettings] = None,
    ):
        self.settings = settings or AnalyticsSettings()
        self.log = log if log is not None else QueryEventLog(max_events=self.settings.max_events)
        self.store = store

    def record_query_event(self, event: QueryEvent) -> bool:
        """Append ``event`` locally, then mirror it to the store.

        Returns:
            True if the store accepted the event, False if there is no store or it failed.
        """
        self.log.append(event)
        if self.store is None:
            return False
        try:
            self.store.append_event(event)
        except Exception:
            logger.warning("Could not persist query event %s", event.id, exc_info=True)
            return False
        logger.debug("Persisted query event %s", event.id)
        return True

    def compute_dashboard_stats(
        self,
        now: Optional[datetime] = None,
        total_documents: int = 0,
        total_users: int = 0,
    ) -> Dict:
        stats = compute_dashboard_stats(
            self.log.snapshot(),
            now=now,
            top_queries_limit=self.settings.top_queries_limit,
            recent_activity_limit=self.settings.recent_activity_limit,
            days_window=self.settings.days_window,
        )
        stats["total_documents"] = total_documents
        stats["total_users"] = total_users
        return stats

    def get_dashboard_chart(self, now: Optional[datetime] = None) -> Dict:
        return dashboard_chart(self.compute_dashboard_stats(now=now))

    def load_from_store(self) -> int:
        """Replace the local log with the store's events.

        Returns the number of events now held locally, or 0 if the store could
        not be read (the local log is then left untouched).
        """
        if self.store is None:
            return 0
        try:
            events = self.store.load_all_events()
        except Exception:
            logger.warning("Could not load query events, keeping local log", exc_info=True)
            return 0
        self.log.replace(events)
        loaded = len(self.log)
        logger.debug("Loaded %d query events from store", loaded)
        return loaded

    @contextmanager
    def track_query(
        self,
        query_text: str,
        user_id: str,
        user_name: str,
    ) -> Iterator["QueryTracker"]:
        """
        Time one question/answer turn and record it when the block succeeds.

        Example:
            with service.track_query(question, user.id, user.name) as tracker:
                answer = ask_llm(question, documents)
                tracker.documents_referenced = [doc.name for doc in documents]
        """
        tracker = QueryTracker()
        started = time.monotonic()
        yield tracker
        elapsed_ms = int((time.monotonic() - started) * 1000)
        tracker.event = QueryEvent(
            id=f"analytics-{uuid.uuid4().hex}",
            query_text=query_text,
            user_id=user_id,
            user_name=user_name,
            response_time_ms=elapsed_ms,
            timestamp=datetime.now(timezone.utc),
            documents_referenced=tracker.documents_referenced,
        )
        tracker.persisted = self.record_query_event(tracker.event)


class QueryTracker:
    """Mutable handle yielded by ``AnalyticsService.track_query``."""

    def __init__(self):
        self.documents_referenced: List[str] = []
        self.event: Optional[QueryEvent] = None
        self.persisted = False
