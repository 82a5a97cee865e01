"""FastAPI router exposing query recording and dashboard statistics."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from ..analytics import dashboard_chart
from ..models import QueryEvent, event_to_dict
from ..service import AnalyticsService


class QueryEventIn(BaseModel):
    """Payload sent by the chat front end after each answered question."""

    id: Optional[str] = None
    query: str = Field(min_length=1)
    user_id: str
    user_name: str
    documents_referenced: list[str] = Field(default_factory=list)
    response_time_ms: int = Field(ge=0)
    timestamp: Optional[datetime] = None


def build_router(service: AnalyticsService) -> APIRouter:
    """Create a router bound to one service (and therefore one event log)."""
    router = APIRouter()

    @router.post("/queries", status_code=201)
    def record_query(payload: QueryEventIn) -> dict:
        event = QueryEvent(
            id=payload.id or f"analytics-{uuid.uuid4().hex}",
            query_text=payload.query,
            user_id=payload.user_id,
            user_name=payload.user_name,
            response_time_ms=payload.response_time_ms,
            timestamp=payload.timestamp or datetime.now(timezone.utc),
            documents_referenced=payload.documents_referenced,
        )
        persisted = service.record_query_event(event)
        return {"event": event_to_dict(event), "persisted": persisted}

    @router.get("/dashboard")
    def dashboard(
        total_documents: int = Query(default=0, ge=0),
        total_users: int = Query(default=0, ge=0),
    ) -> dict:
        return service.compute_dashboard_stats(
            total_documents=total_documents,
            total_users=total_users,
        )

    @router.get("/dashboard/chart")
    def chart() -> dict:
        return dashboard_chart(service.compute_dashboard_stats())

    return router
