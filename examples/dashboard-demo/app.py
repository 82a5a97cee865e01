"""QueryMet dashboard demo: FastAPI backend over a SQLite-mirrored event log."""

import logging
from datetime import datetime, timedelta, timezone
from random import Random

from fastapi import FastAPI
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from querymet import AnalyticsService, AnalyticsSettings, QueryEvent, QueryEventLog
from querymet.adapters import SQLAlchemyQueryEventStore
from querymet.adapters.fastapi_routes import build_router

logging.basicConfig(level=logging.INFO)

SETTINGS = AnalyticsSettings.from_env()
RNG = Random(42)
DEMO_QUESTIONS = [
    "What is the vacation policy?",
    "How do I request reimbursement?",
    "  what is the VACATION policy?",
    "Who approves overtime?",
    "Where is the onboarding checklist?",
]

engine = create_engine(SETTINGS.database_url)
store = SQLAlchemyQueryEventStore(
    sessionmaker(bind=engine),
    table_name=SETTINGS.table_name,
    max_events=SETTINGS.max_events,
)
store.create_schema()

service = AnalyticsService(
    log=QueryEventLog(max_events=SETTINGS.max_events),
    store=store,
    settings=SETTINGS,
)

app = FastAPI(title="QueryMet Dashboard Demo", version="0.1.0")
app.include_router(build_router(service), prefix="/api")


def _seed_demo_data() -> None:
    if service.load_from_store():
        return
    now = datetime.now(timezone.utc)
    for idx in range(120):
        service.record_query_event(
            QueryEvent(
                id=f"demo-{idx}",
                query_text=DEMO_QUESTIONS[idx % len(DEMO_QUESTIONS)],
                user_id=f"user-{idx % 4}",
                user_name=f"Demo User {idx % 4}",
                response_time_ms=max(50, int(RNG.gauss(1200, 300))),
                timestamp=now - timedelta(hours=(119 - idx) * 1.3),
                documents_referenced=["handbook.pdf"],
            )
        )


_seed_demo_data()


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "demo": "querymet-dashboard", "events": len(service.log)}
