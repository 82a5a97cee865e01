"""QueryMet - query analytics for document Q&A chat applications."""

from .analytics import (
    compute_bar_widths,
    compute_dashboard_stats,
    compute_queries_by_day,
    compute_top_queries,
    dashboard_chart,
    normalize_query,
)
from .config import AnalyticsSettings
from .errors import MalformedEventError, QueryMetError, StoreError
from .event_log import QueryEventLog
from .models import QueryEvent, parse_query_event
from .service import AnalyticsService

__all__ = [
    "AnalyticsService",
    "AnalyticsSettings",
    "QueryEvent",
    "QueryEventLog",
    "QueryMetError",
    "StoreError",
    "MalformedEventError",
    "parse_query_event",
    "compute_dashboard_stats",
    "compute_top_queries",
    "compute_queries_by_day",
    "compute_bar_widths",
    "dashboard_chart",
    "normalize_query",
]

__version__ = "0.1.0"
