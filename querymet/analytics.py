"""Pure analytics functions that work on query events."""

from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from .models import QueryEvent, as_utc, event_to_dict


def compute_dashboard_stats(
    events: Iterable[QueryEvent],
    now: Optional[datetime] = None,
    top_queries_limit: int = 10,
    recent_activity_limit: int = 20,
    days_window: int = 7,
) -> Dict:
    """
    Compute dashboard statistics from an event log.

    The result depends only on ``events`` and ``now``: events must be given in
    the order they were recorded, and ``now`` (defaulting to the current UTC
    time) picks the last day of the per-day series.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    events_list = list(events)
    if not events_list:
        return empty_dashboard_stats(now=now, days_window=days_window)

    total_queries = len(events_list)
    avg_response_time = sum(event.response_time_ms for event in events_list) / total_queries

    return {
        "generated_at": now.isoformat(),
        "total_queries": total_queries,
        "total_documents": 0,
        "total_users": 0,
        "avg_response_time_ms": avg_response_time,
        "top_queries": compute_top_queries(events_list, limit=top_queries_limit),
        "queries_by_day": compute_queries_by_day(events_list, now=now, days=days_window),
        "recent_activity": [
            event_to_dict(event) for event in reversed(events_list[-recent_activity_limit:])
        ],
    }


def empty_dashboard_stats(now: Optional[datetime] = None, days_window: int = 7) -> Dict:
    """Return zero-valued dashboard statistics, still with a full per-day series."""
    if now is None:
        now = datetime.now(timezone.utc)
    return {
        "generated_at": now.isoformat(),
        "total_queries": 0,
        "total_documents": 0,
        "total_users": 0,
        "avg_response_time_ms": 0,
        "top_queries": [],
        "queries_by_day": compute_queries_by_day([], now=now, days=days_window),
        "recent_activity": [],
    }


def normalize_query(query_text: str) -> str:
    """Grouping key for a question: trimmed and lowercased."""
    return query_text.strip().lower()


def compute_top_queries(events: Iterable[QueryEvent], limit: int = 10) -> List[Dict]:
    """
    Rank normalized queries by how often they were asked.

    Counts are collected in first-seen order and the ranking is a stable sort,
    so queries with the same count keep the order in which they were first seen.
    """
    counts: Dict[str, int] = {}
    for event in events:
        key = normalize_query(event.query_text)
        counts[key] = counts.get(key, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [{"query": query, "count": count} for query, count in ranked[:limit]]


def compute_queries_by_day(
    events: Iterable[QueryEvent],
    now: Optional[datetime] = None,
    days: int = 7,
) -> List[Dict]:
    """Count events per UTC calendar day for the ``days`` days ending today, oldest first."""
    if now is None:
        now = datetime.now(timezone.utc)
    today = as_utc(now).date()
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]

    counts: Dict[date, int] = {day: 0 for day in window}
    for event in events:
        day = as_utc(event.timestamp).date()
        if day in counts:
            counts[day] += 1

    return [{"date": day.isoformat(), "count": counts[day]} for day in window]


def compute_bar_widths(counts: Sequence[int]) -> List[float]:
    """Scale counts to percentages of the largest one (at least 1, so zeros stay zero)."""
    max_count = max(max(counts, default=0), 1)
    return [count / max_count * 100 for count in counts]


def dashboard_chart(stats: Dict) -> Dict:
    """Bar chart data for the top-queries ranking and the per-day series."""
    top_queries = stats["top_queries"]
    queries_by_day = stats["queries_by_day"]
    top_widths = compute_bar_widths([item["count"] for item in top_queries])
    day_widths = compute_bar_widths([item["count"] for item in queries_by_day])
    return {
        "top_queries": [
            {**item, "width_pct": width} for item, width in zip(top_queries, top_widths)
        ],
        "queries_by_day": [
            {**item, "height_pct": height} for item, height in zip(queries_by_day, day_widths)
        ],
    }
