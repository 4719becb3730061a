"""
Process-wide data-access state.

A ``DataContext`` bundles the two pieces of shared mutable state used by the
service layer: the operator list cache and the trucks column memo. The app
builds one at startup and hands it to routes through ``get_data_context``;
tests construct their own.
"""

from dataclasses import dataclass, field

from fastapi import Request

from haulops.config import settings
from haulops.services.cache import ReadThroughCache
from haulops.services.schema_service import ColumnAvailabilityMemo


def _default_memo() -> ColumnAvailabilityMemo:
    return ColumnAvailabilityMemo(
        attempts=settings.SCHEMA_PROBE_ATTEMPTS,
        delay_seconds=settings.SCHEMA_PROBE_DELAY_SECONDS,
    )


@dataclass
class DataContext:
    """
    Shared state injected into services.

    Attributes:
        cache: Read-through cache (operator list)
        columns: First-success memo of table column availability
        operator_cache_ttl_ms: Maximum age of a cached operator list
    """
    cache: ReadThroughCache = field(default_factory=ReadThroughCache)
    columns: ColumnAvailabilityMemo = field(default_factory=_default_memo)
    operator_cache_ttl_ms: int = settings.OPERATOR_CACHE_TTL_MS


def get_data_context(request: Request) -> DataContext:
    """FastAPI dependency returning the app's DataContext."""
    return request.app.state.data_context
