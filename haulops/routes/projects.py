"""
Project and client API endpoints.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from supabase import Client

from haulops.db.client import get_supabase_client
from haulops.db.query import QueryResult
from haulops.schemas.projects import (
    ClientListResponse,
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectResponse,
    ProjectStatus,
    ProjectUpdateRequest,
)
from haulops.services.project_service import (
    complete_project,
    create_project,
    delete_project,
    get_clients,
    get_projects,
    update_project,
)
from haulops.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["projects"])

SupabaseDep = Annotated[Client, Depends(get_supabase_client)]


def _project_or_error(result: QueryResult, project_id: Optional[int], action: str) -> ProjectResponse:
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": f"{action}_error", "details": result.error}
        )
    if result.data is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "details": f"Project {project_id} not found"}
        )
    return ProjectResponse(project=result.data)


@router.get("/projects", response_model=ProjectListResponse, summary="List projects")
async def list_projects(
    supabase_client: SupabaseDep,
    status_filter: Optional[ProjectStatus] = Query(None, alias="status")
) -> ProjectListResponse:
    projects = await get_projects(supabase_client, status=status_filter)
    return ProjectListResponse(projects=projects, count=len(projects))


@router.post(
    "/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create project"
)
async def create_new_project(request: ProjectCreateRequest, supabase_client: SupabaseDep) -> ProjectResponse:
    result = await create_project(supabase_client, request.model_dump(exclude_none=True))
    return _project_or_error(result, None, "create")


@router.patch("/projects/{project_id}", response_model=ProjectResponse, summary="Update project")
async def update_existing_project(
    request: ProjectUpdateRequest,
    supabase_client: SupabaseDep,
    project_id: int = Path(...)
) -> ProjectResponse:
    changes = request.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_request", "details": "No fields provided for update"}
        )
    result = await update_project(supabase_client, project_id, changes)
    return _project_or_error(result, project_id, "update")


@router.post("/projects/{project_id}/complete", response_model=ProjectResponse, summary="Complete project")
async def complete_existing_project(supabase_client: SupabaseDep, project_id: int = Path(...)) -> ProjectResponse:
    result = await complete_project(supabase_client, project_id)
    return _project_or_error(result, project_id, "update")


@router.delete("/projects/{project_id}", response_model=ProjectResponse, summary="Delete project")
async def delete_existing_project(supabase_client: SupabaseDep, project_id: int = Path(...)) -> ProjectResponse:
    result = await delete_project(supabase_client, project_id)
    return _project_or_error(result, project_id, "delete")


@router.get("/clients", response_model=ClientListResponse, summary="List clients")
async def list_clients(
    supabase_client: SupabaseDep,
    with_projects: bool = Query(False, description="Embed each client's projects")
) -> ClientListResponse:
    clients = await get_clients(supabase_client, with_projects=with_projects)
    return ClientListResponse(clients=clients, count=len(clients))
