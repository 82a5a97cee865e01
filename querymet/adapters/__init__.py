"""Adapters for integrating QueryMet with storage and frameworks."""

from .sqlalchemy_store import SQLAlchemyQueryEventStore

__all__ = ["SQLAlchemyQueryEventStore"]
