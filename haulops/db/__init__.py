"""
Database access layer for the HaulOps backend.

All data lives in a hosted Supabase project. This package only builds the
client and normalizes backend responses into ``QueryResult`` pairs.

DO NOT define table schemas or migrations here.
"""

from .client import get_supabase_client
from .query import QueryResult, execute_query

__all__ = ["get_supabase_client", "QueryResult", "execute_query"]
