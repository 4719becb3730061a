"""
Operator API endpoints.

Operators are listed from the cached ``get_operators_joined`` RPC; every
mutation here goes through the operator service, which invalidates that
cache.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from supabase import Client

from haulops.context import DataContext, get_data_context
from haulops.db.client import get_supabase_client
from haulops.schemas.operators import (
    OperatorCreateRequest,
    OperatorLinksRequest,
    OperatorLinksResponse,
    OperatorListResponse,
    OperatorMutationResponse,
    OperatorUpdateRequest,
)
from haulops.services.operator_service import (
    check_login_exists,
    create_operator,
    delete_operator,
    get_operators,
    update_operator,
    update_operator_projects,
    update_operator_trucks,
)
from haulops.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/operators", tags=["operators"])

SupabaseDep = Annotated[Client, Depends(get_supabase_client)]
ContextDep = Annotated[DataContext, Depends(get_data_context)]


@router.get(
    "",
    response_model=OperatorListResponse,
    summary="List operators",
    description="Operators joined with their trucks and projects (cached)."
)
async def list_operators(
    supabase_client: SupabaseDep,
    ctx: ContextDep
) -> OperatorListResponse:
    result = await get_operators(
        supabase_client,
        ctx.cache,
        max_age_ms=ctx.operator_cache_ttl_ms
    )

    if not result.ok:
        logger.error(f"Failed to list operators: {result.error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to retrieve operators"}
        )

    operators = result.data or []
    return OperatorListResponse(operators=operators, count=len(operators))


@router.post(
    "",
    response_model=OperatorMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create operator"
)
async def create_new_operator(
    request: OperatorCreateRequest,
    supabase_client: SupabaseDep,
    ctx: ContextDep
) -> OperatorMutationResponse:
    """
    Create an operator and link its trucks and projects.

    Link failures do not undo the created operator; they are reported as
    warnings.
    """
    if await check_login_exists(supabase_client, request.login):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": "login_exists", "details": f"Login '{request.login}' already exists"}
        )

    payload = request.model_dump(exclude={"truck_ids", "project_ids"}, exclude_none=True)
    result = await create_operator(supabase_client, ctx.cache, payload)

    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "create_error", "details": result.error}
        )

    created = result.first()
    operator_id = created.get("id") if created else None
    warnings = []

    if operator_id is not None:
        trucks_result = await update_operator_trucks(
            supabase_client, ctx.cache, operator_id, request.truck_ids
        )
        if not trucks_result.ok:
            warnings.append(f"Failed to link trucks: {trucks_result.error}")

        projects_result = await update_operator_projects(
            supabase_client, ctx.cache, operator_id, request.project_ids
        )
        if not projects_result.ok:
            warnings.append(f"Failed to link projects: {projects_result.error}")

    return OperatorMutationResponse(
        status="CREATED",
        operator_id=operator_id,
        message="Operator created successfully",
        warnings=warnings
    )


@router.patch(
    "/{operator_id}",
    response_model=OperatorMutationResponse,
    summary="Update operator"
)
async def update_existing_operator(
    request: OperatorUpdateRequest,
    supabase_client: SupabaseDep,
    ctx: ContextDep,
    operator_id: int = Path(..., description="Operator id")
) -> OperatorMutationResponse:
    changes = request.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_request", "details": "No fields provided for update"}
        )

    result = await update_operator(supabase_client, ctx.cache, operator_id, changes)
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "update_error", "details": result.error}
        )

    return OperatorMutationResponse(
        status="UPDATED",
        operator_id=operator_id,
        message="Operator updated successfully"
    )


@router.delete(
    "/{operator_id}",
    response_model=OperatorMutationResponse,
    summary="Delete operator"
)
async def delete_existing_operator(
    supabase_client: SupabaseDep,
    ctx: ContextDep,
    operator_id: int = Path(..., description="Operator id")
) -> OperatorMutationResponse:
    result = await delete_operator(supabase_client, ctx.cache, operator_id)
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "delete_error", "details": result.error}
        )

    return OperatorMutationResponse(
        status="DELETED",
        operator_id=operator_id,
        message="Operator deleted successfully"
    )


@router.put(
    "/{operator_id}/trucks",
    response_model=OperatorLinksResponse,
    summary="Replace operator trucks"
)
async def replace_operator_trucks(
    request: OperatorLinksRequest,
    supabase_client: SupabaseDep,
    ctx: ContextDep,
    operator_id: int = Path(..., description="Operator id")
) -> OperatorLinksResponse:
    result = await update_operator_trucks(supabase_client, ctx.cache, operator_id, request.ids)
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "link_error", "details": result.error}
        )
    return OperatorLinksResponse(operator_id=operator_id, linked=len(request.ids))


@router.put(
    "/{operator_id}/projects",
    response_model=OperatorLinksResponse,
    summary="Replace operator projects"
)
async def replace_operator_projects(
    request: OperatorLinksRequest,
    supabase_client: SupabaseDep,
    ctx: ContextDep,
    operator_id: int = Path(..., description="Operator id")
) -> OperatorLinksResponse:
    result = await update_operator_projects(supabase_client, ctx.cache, operator_id, request.ids)
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "link_error", "details": result.error}
        )
    return OperatorLinksResponse(operator_id=operator_id, linked=len(request.ids))
