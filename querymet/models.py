"""Core domain models used by the analytics engine."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Sequence

from .errors import MalformedEventError


@dataclass(frozen=True)
class QueryEvent:
    """One answered question together with its answering metadata."""

    id: str
    query_text: str
    user_id: str
    user_name: str
    response_time_ms: int
    timestamp: datetime
    documents_referenced: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self):
        if self.response_time_ms < 0:
            raise ValueError(f"response_time_ms must be >= 0, got {self.response_time_ms}")
        object.__setattr__(self, "documents_referenced", tuple(self.documents_referenced))


def event_to_dict(event: QueryEvent) -> Dict[str, Any]:
    """Serialize an event into the JSON-friendly shape used by dashboards."""
    return {
        "id": event.id,
        "query": event.query_text,
        "user_id": event.user_id,
        "user_name": event.user_name,
        "documents_referenced": list(event.documents_referenced),
        "response_time_ms": event.response_time_ms,
        "timestamp": event.timestamp.isoformat(),
    }


def parse_query_event(record: Mapping[str, Any]) -> QueryEvent:
    """
    Build a QueryEvent from a stored record.

    Accepts either the serialized event shape or a raw table row
    (``created_at`` instead of ``timestamp``).

    Raises:
        MalformedEventError: if the timestamp or response time is missing or invalid.
    """
    raw_timestamp = record.get("timestamp", record.get("created_at"))
    timestamp = _parse_timestamp(raw_timestamp)
    if timestamp is None:
        raise MalformedEventError(f"invalid timestamp in record {record.get('id')!r}: {raw_timestamp!r}")

    raw_latency = record.get("response_time_ms", record.get("response_time"))
    try:
        response_time_ms = int(raw_latency)
    except (TypeError, ValueError):
        raise MalformedEventError(
            f"invalid response time in record {record.get('id')!r}: {raw_latency!r}"
        ) from None
    if response_time_ms < 0:
        raise MalformedEventError(f"negative response time in record {record.get('id')!r}")

    return QueryEvent(
        id=str(record.get("id") or ""),
        query_text=str(record.get("query", record.get("query_text")) or ""),
        user_id=str(record.get("user_id") or ""),
        user_name=str(record.get("user_name") or ""),
        response_time_ms=response_time_ms,
        timestamp=timestamp,
        documents_referenced=_parse_document_list(record.get("documents_referenced")),
    )


def _parse_timestamp(raw_value):
    if isinstance(raw_value, datetime):
        return raw_value
    if isinstance(raw_value, str) and raw_value:
        try:
            # Python < 3.11 rejects the trailing "Z" used by JavaScript clients.
            return datetime.fromisoformat(raw_value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _parse_document_list(raw_documents) -> list[str]:
    if raw_documents is None:
        return []
    if isinstance(raw_documents, str):
        try:
            raw_documents = json.loads(raw_documents)
        except json.JSONDecodeError:
            return []
    if isinstance(raw_documents, (list, tuple)):
        return [str(name) for name in raw_documents if name is not None]
    return []


def as_utc(timestamp: datetime) -> datetime:
    """Return an aware UTC datetime, treating naive values as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)
