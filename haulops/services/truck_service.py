"""
Truck service.

CRUD for the ``trucks`` table. Writes are passed through the record mapper
so canonical field names are translated to whatever columns exist on the
live table. Reads never raise: backend failures become empty lists.
"""

import logging
from typing import Any, Dict, List, cast

from supabase import Client

from haulops.db.query import QueryResult, error_message, execute_query
from haulops.services.record_mapper import adapt_truck_to_schema
from haulops.services.schema_service import ColumnAvailability

logger = logging.getLogger(__name__)

NO_WRITABLE_FIELDS = "No writable fields left for the live trucks schema"


async def get_trucks(supabase_client: Client) -> List[Dict[str, Any]]:
    """Fetch all trucks ordered by name."""
    result = execute_query(
        supabase_client.table("trucks").select("*").order("name"),
        "Fetch trucks"
    )
    trucks = cast(List[Dict[str, Any]], result.data or [])
    logger.info(f"Found {len(trucks)} trucks")
    return trucks


def _trucks_by_project_column(
    supabase_client: Client,
    column: str,
    assigned: bool
) -> List[Dict[str, Any]]:
    query = supabase_client.table("trucks").select("*")
    if assigned:
        query = query.not_.is_(column, "null")
    else:
        query = query.is_(column, "null")

    try:
        response = query.order("name").execute()
    except Exception as e:
        logger.warning(f"Truck lookup by '{column}' failed: {error_message(e)}")
        return []

    return cast(List[Dict[str, Any]], response.data or [])


async def get_active_trucks(
    supabase_client: Client,
    columns: ColumnAvailability
) -> List[Dict[str, Any]]:
    """
    Fetch trucks currently assigned to a project.

    Tries ``current_project``, then ``project_id``; when neither column
    yields rows, every truck is returned.
    """
    try:
        for column in ("current_project", "project_id"):
            if not getattr(columns, column):
                continue
            trucks = _trucks_by_project_column(supabase_client, column, assigned=True)
            if trucks:
                logger.info(f"Found {len(trucks)} active trucks by '{column}'")
                return trucks

        logger.warning("Could not determine active trucks by column; returning all trucks")
        return await get_trucks(supabase_client)
    except Exception as e:
        logger.error(f"Error fetching active trucks: {e}", exc_info=True)
        return []


async def get_inactive_trucks(
    supabase_client: Client,
    columns: ColumnAvailability
) -> List[Dict[str, Any]]:
    """
    Fetch trucks without a project assignment.

    Tries ``current_project``, then ``project_id``; falls back to an empty list.
    """
    try:
        for column in ("current_project", "project_id"):
            if not getattr(columns, column):
                continue
            trucks = _trucks_by_project_column(supabase_client, column, assigned=False)
            if trucks:
                logger.info(f"Found {len(trucks)} inactive trucks by '{column}'")
                return trucks

        logger.warning("Could not determine inactive trucks by column; returning empty list")
        return []
    except Exception as e:
        logger.error(f"Error fetching inactive trucks: {e}", exc_info=True)
        return []


async def create_truck(
    supabase_client: Client,
    truck: Dict[str, Any],
    columns: ColumnAvailability
) -> QueryResult:
    """
    Insert a truck after adapting it to the live schema.

    Returns:
        QueryResult whose data is the created row
    """
    adapted = adapt_truck_to_schema(truck, columns)
    logger.info(f"Creating truck with fields {sorted(adapted.keys())}")

    result = execute_query(
        supabase_client.table("trucks").insert([adapted]),
        "Create truck"
    )
    if not result.ok:
        return result

    created = result.first()
    if created is None:
        return QueryResult(error="Failed to create truck: no data returned")

    logger.info(f"Truck created: {created.get('id')}")
    return QueryResult(data=created)


async def update_truck(
    supabase_client: Client,
    truck_id: int,
    truck: Dict[str, Any],
    columns: ColumnAvailability
) -> QueryResult:
    """
    Update a truck after adapting the changes to the live schema.

    Returns:
        QueryResult whose data is the updated row, or None if no row matched
    """
    adapted = adapt_truck_to_schema(truck, columns)
    if not adapted:
        logger.warning(f"Update of truck {truck_id} dropped every field: {sorted(truck.keys())}")
        return QueryResult(error=NO_WRITABLE_FIELDS)

    logger.info(f"Updating truck {truck_id}: {sorted(adapted.keys())}")

    result = execute_query(
        supabase_client.table("trucks").update(adapted).eq("id", truck_id),
        f"Update truck {truck_id}"
    )
    if not result.ok:
        return result

    return QueryResult(data=result.first())


async def delete_truck(supabase_client: Client, truck_id: int) -> QueryResult:
    """
    Delete a truck.

    Returns:
        QueryResult whose data is the deleted row, or None if no row matched
    """
    logger.info(f"Deleting truck {truck_id}")

    result = execute_query(
        supabase_client.table("trucks").delete().eq("id", truck_id),
        f"Delete truck {truck_id}"
    )
    if not result.ok:
        return result

    return QueryResult(data=result.first())
