from datetime import datetime, timedelta, timezone

from querymet.analytics import (
    compute_bar_widths,
    compute_dashboard_stats,
    compute_queries_by_day,
    compute_top_queries,
    dashboard_chart,
    normalize_query,
)
from querymet.models import QueryEvent


NOW = datetime(2024, 6, 10, 15, 30, tzinfo=timezone.utc)


def _event(idx, query="question", response_time_ms=100, timestamp=NOW):
    return QueryEvent(
        id=f"e{idx}",
        query_text=query,
        user_id="u1",
        user_name="Ana",
        response_time_ms=response_time_ms,
        timestamp=timestamp,
        documents_referenced=["handbook.pdf"],
    )


def test_compute_dashboard_stats_basic():
    events = [
        _event(1, "What is the policy?", 100),
        _event(2, "  what is the POLICY?  ", 300),
        _event(3, "Who approves overtime?", 200),
    ]

    result = compute_dashboard_stats(events, now=NOW)

    assert result["total_queries"] == 3
    assert result["avg_response_time_ms"] == 200
    assert result["top_queries"] == [
        {"query": "what is the policy?", "count": 2},
        {"query": "who approves overtime?", "count": 1},
    ]
    assert len(result["queries_by_day"]) == 7
    assert result["queries_by_day"][-1] == {"date": "2024-06-10", "count": 3}
    assert [item["id"] for item in result["recent_activity"]] == ["e3", "e2", "e1"]
    assert result["generated_at"] == NOW.isoformat()


def test_compute_dashboard_stats_empty_log():
    result = compute_dashboard_stats([], now=NOW)

    assert result["total_queries"] == 0
    assert result["avg_response_time_ms"] == 0
    assert result["top_queries"] == []
    assert result["recent_activity"] == []
    assert [item["count"] for item in result["queries_by_day"]] == [0] * 7
    assert result["queries_by_day"][0]["date"] == "2024-06-04"


def test_average_response_time_is_arithmetic_mean():
    latencies = [0, 15, 250, 1234, 7]
    events = [_event(i, response_time_ms=value) for i, value in enumerate(latencies)]

    result = compute_dashboard_stats(events, now=NOW)

    assert abs(result["avg_response_time_ms"] - sum(latencies) / len(latencies)) < 1e-9


def test_compute_top_queries_ranks_by_count():
    queries = ["a", "b", "a", "c", "a", "b"]
    events = [_event(i, query) for i, query in enumerate(queries)]

    assert compute_top_queries(events) == [
        {"query": "a", "count": 3},
        {"query": "b", "count": 2},
        {"query": "c", "count": 1},
    ]


def test_compute_top_queries_breaks_ties_by_first_seen():
    queries = ["zeta", "alpha", "mid", "alpha", "zeta", "mid"]
    events = [_event(i, query) for i, query in enumerate(queries)]

    result = compute_top_queries(events)

    assert [item["query"] for item in result] == ["zeta", "alpha", "mid"]


def test_compute_top_queries_truncates_to_limit():
    events = [_event(i, f"question {i}") for i in range(15)]

    result = compute_top_queries(events)

    assert len(result) == 10
    assert result[0] == {"query": "question 0", "count": 1}


def test_normalize_query_trims_and_lowercases():
    assert normalize_query("  Where IS the Handbook?\n") == "where is the handbook?"


def test_compute_queries_by_day_buckets_by_calendar_date():
    today = datetime(2024, 6, 10, tzinfo=timezone.utc)
    events = [
        _event(1, timestamp=datetime(2024, 5, 1, 9, tzinfo=timezone.utc)),
        _event(2, timestamp=datetime(2024, 5, 1, 10, tzinfo=timezone.utc)),
        _event(3, timestamp=datetime(2024, 5, 1, 11, tzinfo=timezone.utc)),
        _event(4, timestamp=datetime(2024, 5, 1, 12, tzinfo=timezone.utc)),
        _event(5, timestamp=datetime(2024, 5, 1, 13, tzinfo=timezone.utc)),
        _event(6, timestamp=datetime(2024, 6, 8, 23, 59, tzinfo=timezone.utc)),
        _event(7, timestamp=datetime(2024, 6, 10, 0, 0, tzinfo=timezone.utc)),
        _event(8, timestamp=datetime(2024, 6, 10, 22, 45, tzinfo=timezone.utc)),
    ]

    result = compute_queries_by_day(events, now=today)

    assert [item["date"] for item in result] == [
        "2024-06-04",
        "2024-06-05",
        "2024-06-06",
        "2024-06-07",
        "2024-06-08",
        "2024-06-09",
        "2024-06-10",
    ]
    assert [item["count"] for item in result] == [0, 0, 0, 0, 1, 0, 2]


def test_compute_queries_by_day_uses_utc_dates():
    brasilia = timezone(timedelta(hours=-3))
    # 22:00 in Brasilia on June 9th is already June 10th in UTC.
    events = [_event(1, timestamp=datetime(2024, 6, 9, 22, 0, tzinfo=brasilia))]

    result = compute_queries_by_day(events, now=NOW)

    assert result[-1] == {"date": "2024-06-10", "count": 1}
    assert result[-2] == {"date": "2024-06-09", "count": 0}


def test_compute_queries_by_day_treats_naive_timestamps_as_utc():
    events = [_event(1, timestamp=datetime(2024, 6, 7, 12, 0))]

    result = compute_queries_by_day(events, now=NOW)

    assert result[3] == {"date": "2024-06-07", "count": 1}


def test_recent_activity_is_newest_first_and_capped():
    events = [_event(i) for i in range(1, 26)]

    result = compute_dashboard_stats(events, now=NOW)

    assert [item["id"] for item in result["recent_activity"]] == [f"e{i}" for i in range(25, 5, -1)]


def test_compute_dashboard_stats_is_idempotent():
    events = [_event(i, f"q{i % 3}", response_time_ms=i * 10) for i in range(30)]

    first = compute_dashboard_stats(events, now=NOW)
    second = compute_dashboard_stats(events, now=NOW)

    assert first == second


def test_compute_bar_widths_scales_to_max():
    assert compute_bar_widths([5, 10, 0]) == [50.0, 100.0, 0.0]
    assert compute_bar_widths([0, 0]) == [0.0, 0.0]
    assert compute_bar_widths([]) == []


def test_dashboard_chart_adds_scaled_bars():
    events = [_event(1, "a"), _event(2, "a"), _event(3, "b")]
    stats = compute_dashboard_stats(events, now=NOW)

    chart = dashboard_chart(stats)

    assert chart["top_queries"] == [
        {"query": "a", "count": 2, "width_pct": 100.0},
        {"query": "b", "count": 1, "width_pct": 50.0},
    ]
    assert chart["queries_by_day"][-1]["height_pct"] == 100.0
    assert chart["queries_by_day"][0]["height_pct"] == 0.0
