"""Scoped fields attached to every log record emitted inside a block.

Fields live in a ContextVar, so concurrent threads and tasks each see their
own values. Typical fields are volunteer_id, event_id and operation.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current context."""
    return LogContextVar.get().copy()


def push_log_context(**fields) -> Token:
    """Merge fields into the current context.

    Returns:
        Token for pop_log_context()

    Example:
        >>> token = push_log_context(volunteer_id=1)
        >>> pop_log_context(token)
    """
    return LogContextVar.set({**LogContextVar.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the fields that were active before push_log_context()."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every field. Used by tests."""
    LogContextVar.set({})


class log_context:
    """Context manager that adds fields for the duration of a block.

    Example:
        >>> with log_context(volunteer_id=1, operation="match"):
        ...     logger.info("Ranking events")
    """

    def __init__(self, **fields):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
            self.token = None
        return False
