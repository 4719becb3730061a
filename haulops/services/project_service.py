"""
Project and client service.

Projects are job sites that trucks haul material to or from; clients own
projects. Reads return empty lists on backend errors, writes return a
QueryResult.
"""

import logging
from typing import Any, Dict, List, Optional, cast

from supabase import Client

from haulops.db.query import QueryResult, execute_query

logger = logging.getLogger(__name__)


async def get_projects(
    supabase_client: Client,
    status: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Fetch projects, optionally filtered by status, ordered by name."""
    query = supabase_client.table("projects").select("*")
    if status is not None:
        query = query.eq("status", status)

    result = execute_query(query.order("name"), f"Fetch projects (status={status})")
    projects = cast(List[Dict[str, Any]], result.data or [])
    logger.info(f"Found {len(projects)} projects (status={status})")
    return projects


async def get_active_projects(supabase_client: Client) -> List[Dict[str, Any]]:
    return await get_projects(supabase_client, status="active")


async def get_completed_projects(supabase_client: Client) -> List[Dict[str, Any]]:
    return await get_projects(supabase_client, status="completed")


async def create_project(supabase_client: Client, project: Dict[str, Any]) -> QueryResult:
    """Insert a project and return the created row."""
    logger.info(f"Creating project '{project.get('name')}'")
    result = execute_query(
        supabase_client.table("projects").insert([project]),
        "Create project"
    )
    if not result.ok:
        return result
    return QueryResult(data=result.first())


async def update_project(
    supabase_client: Client,
    project_id: int,
    changes: Dict[str, Any]
) -> QueryResult:
    """Update a project and return the updated row (None if no row matched)."""
    logger.info(f"Updating project {project_id}: {sorted(changes.keys())}")
    result = execute_query(
        supabase_client.table("projects").update(changes).eq("id", project_id),
        f"Update project {project_id}"
    )
    if not result.ok:
        return result
    return QueryResult(data=result.first())


async def complete_project(supabase_client: Client, project_id: int) -> QueryResult:
    """Mark a project as completed."""
    return await update_project(supabase_client, project_id, {"status": "completed"})


async def delete_project(supabase_client: Client, project_id: int) -> QueryResult:
    """Delete a project and return the deleted row (None if no row matched)."""
    logger.info(f"Deleting project {project_id}")
    result = execute_query(
        supabase_client.table("projects").delete().eq("id", project_id),
        f"Delete project {project_id}"
    )
    if not result.ok:
        return result
    return QueryResult(data=result.first())


async def get_clients(
    supabase_client: Client,
    with_projects: bool = False
) -> List[Dict[str, Any]]:
    """
    Fetch clients ordered by name.

    Args:
        supabase_client: Supabase client
        with_projects: Embed each client's projects under ``projects``
    """
    columns = "*, projects(*)" if with_projects else "*"
    result = execute_query(
        supabase_client.table("clients").select(columns).order("name"),
        "Fetch clients"
    )
    return cast(List[Dict[str, Any]], result.data or [])


async def get_clients_with_projects(supabase_client: Client) -> List[Dict[str, Any]]:
    return await get_clients(supabase_client, with_projects=True)
