# core/errors.py


class QueryError(RuntimeError):
    """A read or write against the data store failed (transport, auth or bad filter)."""
