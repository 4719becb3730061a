"""
Normalized query results.

Supabase's Python SDK raises on backend errors instead of returning an
``{data, error}`` pair. Services in this package never let those raw errors
reach their callers, so every write goes through ``execute_query`` and comes
back as a ``QueryResult``.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for "undefined column"
UNDEFINED_COLUMN_CODE = "42703"

_UNDEFINED_COLUMN_MESSAGE = re.compile(r"\bcolumn\b.*\bdoes not exist\b")


@dataclass
class QueryResult:
    """
    Result of a backend call.

    Attributes:
        data: Rows (or RPC payload) returned by the backend, None on failure
        error: Sanitized error message, None on success
    """
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def first(self) -> Optional[dict[str, Any]]:
        """Return the first returned row, if any."""
        if isinstance(self.data, list) and self.data:
            return self.data[0]
        return None


def error_message(exc: Exception) -> str:
    """Extract a readable message from a postgrest/httpx exception."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or exc.__class__.__name__


def is_undefined_column_error(exc: Exception) -> bool:
    """Check whether the backend rejected a query because a column is missing."""
    if getattr(exc, "code", None) == UNDEFINED_COLUMN_CODE:
        return True
    # A missing relation (42P01) also "does not exist" but is not a column error
    return bool(_UNDEFINED_COLUMN_MESSAGE.search(error_message(exc)))


def execute_query(query: Any, description: str) -> QueryResult:
    """
    Execute a prepared Supabase query and normalize the outcome.

    Args:
        query: A request builder (table or RPC) ready for ``.execute()``
        description: Short label used in log messages

    Returns:
        QueryResult with the response data, or with ``error`` set when the
        backend call raised.
    """
    try:
        response = query.execute()
    except Exception as e:
        message = error_message(e)
        logger.error(f"{description} failed: {message}")
        return QueryResult(data=None, error=message)

    return QueryResult(data=response.data, error=None)
