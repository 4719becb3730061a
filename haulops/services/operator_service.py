"""
Operator service.

Operators are the truck drivers who log trips from the field app. The joined
operator list (operators with their trucks and projects) is read through the
read-through cache. Every mutation of an operator, or of its truck/project
links, invalidates that list whether or not the change touched a listed
field.
"""

import logging
from typing import Any, Dict, List

from supabase import Client

from haulops.db.query import QueryResult, error_message, execute_query
from haulops.services.cache import ReadThroughCache

logger = logging.getLogger(__name__)

OPERATORS_CACHE_KEY = "operators:list"


async def get_operators(
    supabase_client: Client,
    cache: ReadThroughCache,
    max_age_ms: float = 60_000
) -> QueryResult:
    """
    Fetch operators joined with their trucks and projects.

    Successful results are cached for ``max_age_ms``; failures are not cached.
    """
    async def fetch() -> QueryResult:
        result = execute_query(
            supabase_client.rpc("get_operators_joined", {}),
            "Fetch operators"
        )
        if result.ok:
            logger.info(f"Fetched {len(result.data or [])} operators from backend")
        return result

    return await cache.get_or_fetch(
        OPERATORS_CACHE_KEY,
        max_age_ms,
        fetch,
        should_store=lambda result: result.ok,
    )


async def check_login_exists(supabase_client: Client, login: str) -> bool:
    """Check whether an operator already uses ``login``. False when the lookup fails."""
    try:
        response = (
            supabase_client.table("operators")
            .select("id")
            .eq("login", login)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.error(f"Login lookup failed: {error_message(e)}")
        return False

    return bool(response.data)


async def create_operator(
    supabase_client: Client,
    cache: ReadThroughCache,
    operator: Dict[str, Any]
) -> QueryResult:
    """Insert an operator. The operator list cache is invalidated."""
    logger.info(f"Creating operator with login '{operator.get('login')}'")
    try:
        return execute_query(
            supabase_client.table("operators").insert([operator]),
            "Create operator"
        )
    finally:
        cache.invalidate(OPERATORS_CACHE_KEY)


async def update_operator(
    supabase_client: Client,
    cache: ReadThroughCache,
    operator_id: int,
    operator: Dict[str, Any]
) -> QueryResult:
    """Update an operator. The operator list cache is invalidated."""
    logger.info(f"Updating operator {operator_id}: {sorted(operator.keys())}")
    try:
        return execute_query(
            supabase_client.table("operators").update(operator).eq("id", operator_id),
            f"Update operator {operator_id}"
        )
    finally:
        cache.invalidate(OPERATORS_CACHE_KEY)


async def delete_operator(
    supabase_client: Client,
    cache: ReadThroughCache,
    operator_id: int
) -> QueryResult:
    """Delete an operator. The operator list cache is invalidated."""
    logger.info(f"Deleting operator {operator_id}")
    try:
        return execute_query(
            supabase_client.table("operators").delete().eq("id", operator_id),
            f"Delete operator {operator_id}"
        )
    finally:
        cache.invalidate(OPERATORS_CACHE_KEY)


def _replace_links(
    supabase_client: Client,
    table: str,
    column: str,
    operator_id: int,
    linked_ids: List[int]
) -> QueryResult:
    removed = execute_query(
        supabase_client.table(table).delete().eq("operator_id", operator_id),
        f"Clear {table} for operator {operator_id}"
    )
    if not removed.ok or not linked_ids:
        return removed

    rows = [{"operator_id": operator_id, column: linked_id} for linked_id in linked_ids]
    return execute_query(
        supabase_client.table(table).insert(rows),
        f"Link {len(rows)} rows in {table} for operator {operator_id}"
    )


async def update_operator_trucks(
    supabase_client: Client,
    cache: ReadThroughCache,
    operator_id: int,
    truck_ids: List[int]
) -> QueryResult:
    """Replace the set of trucks an operator may drive."""
    try:
        return _replace_links(supabase_client, "operator_trucks", "truck_id", operator_id, truck_ids)
    finally:
        cache.invalidate(OPERATORS_CACHE_KEY)


async def update_operator_projects(
    supabase_client: Client,
    cache: ReadThroughCache,
    operator_id: int,
    project_ids: List[int]
) -> QueryResult:
    """Replace the set of projects an operator works on."""
    try:
        return _replace_links(supabase_client, "operator_projects", "project_id", operator_id, project_ids)
    finally:
        cache.invalidate(OPERATORS_CACHE_KEY)
