"""Runtime settings for the analytics log and dashboard."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "QUERYMET_"


class AnalyticsSettings(BaseModel):
    """Limits applied to the event log and the dashboard statistics."""

    max_events: int = Field(default=1000, gt=0, description="Most recent events kept in the log")
    top_queries_limit: int = Field(default=10, gt=0)
    recent_activity_limit: int = Field(default=20, gt=0)
    days_window: int = Field(default=7, gt=0, description="Calendar days in the per-day series")

    # Durable store
    database_url: str = Field(default="sqlite:///querymet.db")
    table_name: str = Field(default="query_analytics", pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AnalyticsSettings":
        """Load settings from ``QUERYMET_*`` environment variables."""
        if environ is None:
            environ = os.environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        return cls(**values)
