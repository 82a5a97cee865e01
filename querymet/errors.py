"""Exceptions raised by QueryMet."""


class QueryMetError(Exception):
    """Base class for all QueryMet errors."""


class StoreError(QueryMetError):
    """The durable event store could not be read or written."""


class MalformedEventError(QueryMetError, ValueError):
    """A stored record cannot be turned into a query event."""
