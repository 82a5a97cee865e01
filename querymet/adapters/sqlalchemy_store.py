"""SQLAlchemy store adapter for QueryMet."""

import json
import logging
import re
from typing import Callable, Sequence

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import MalformedEventError, StoreError
from ..models import QueryEvent, as_utc, parse_query_event

logger = logging.getLogger(__name__)

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SQLAlchemyQueryEventStore:
    """Persists query events in a relational table and maps rows back to domain models.

    Every call opens its own session from ``session_factory`` (usually a
    ``sessionmaker``), so one store can serve concurrent request handlers.
    Rows are returned in insertion order, tracked by the ``seq`` column.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        table_name: str = "query_analytics",
        max_events: int = 1000,
    ):
        if not _TABLE_NAME_RE.match(table_name):
            raise ValueError(f"invalid table name: {table_name!r}")
        self.session_factory = session_factory
        self.table_name = table_name
        self.max_events = max_events
        self.table = Table(
            table_name,
            MetaData(),
            Column("seq", Integer, primary_key=True, autoincrement=True),
            Column("id", String(64), nullable=False, unique=True),
            Column("query", Text, nullable=False),
            Column("user_id", String(64), nullable=False),
            Column("user_name", String(255), nullable=False),
            Column("documents_referenced", Text, nullable=False),
            Column("response_time_ms", Integer, nullable=False),
            Column("created_at", String(64), nullable=False),
        )

    def create_schema(self) -> None:
        try:
            with self.session_factory() as db:
                self.table.metadata.create_all(db.connection())
                db.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to create {self.table_name}: {exc}") from exc

    def append_event(self, event: QueryEvent) -> None:
        try:
            params = {
                "id": event.id,
                "query": event.query_text,
                "user_id": event.user_id,
                "user_name": event.user_name,
                "documents_referenced": json.dumps(list(event.documents_referenced)),
                "response_time_ms": event.response_time_ms,
                "created_at": as_utc(event.timestamp).isoformat(),
            }
            with self.session_factory() as db:
                db.execute(
                    text(
                        f"""
                        INSERT INTO {self.table_name}
                            (id, query, user_id, user_name, documents_referenced,
                             response_time_ms, created_at)
                        VALUES
                            (:id, :query, :user_id, :user_name, :documents_referenced,
                             :response_time_ms, :created_at)
                        """
                    ),
                    params,
                )
                db.commit()
        except (SQLAlchemyError, TypeError, ValueError) as exc:
            raise StoreError(f"failed to write event {event.id!r} to {self.table_name}: {exc}") from exc

    def load_all_events(self) -> Sequence[QueryEvent]:
        """Return the newest ``max_events`` rows in the order they were recorded.

        Malformed rows are skipped.
        """
        try:
            with self.session_factory() as db:
                rows = db.execute(
                    text(
                        f"""
                        SELECT id, query, user_id, user_name, documents_referenced,
                               response_time_ms, created_at
                        FROM {self.table_name}
                        ORDER BY seq DESC
                        LIMIT :limit
                        """
                    ),
                    {"limit": self.max_events},
                ).fetchall()
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to load query events: {exc}") from exc

        result: list[QueryEvent] = []
        for row in reversed(rows):
            try:
                result.append(parse_query_event(row._mapping))
            except MalformedEventError as exc:
                logger.warning("Skipping malformed query event row: %s", exc)
        return result
