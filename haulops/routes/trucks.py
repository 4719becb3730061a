"""
Truck API endpoints.

Writes use the column availability memoized in the DataContext. The schema
check endpoint probes the table fresh on every call (with the bounded retry
policy) so the trucks page can warn about missing columns.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from supabase import Client

from haulops.config import settings
from haulops.context import DataContext, get_data_context
from haulops.db.client import get_supabase_client
from haulops.schemas.trucks import (
    SchemaCheckResponse,
    SchemaRepairResponse,
    TruckCreateRequest,
    TruckListResponse,
    TruckResponse,
    TruckUpdateRequest,
)
from haulops.services.schema_service import (
    ColumnAvailability,
    SchemaVerificationUnavailable,
    missing_column_groups,
    repair_trucks_schema,
    verify_table_schema,
)
from haulops.services.truck_service import (
    NO_WRITABLE_FIELDS,
    create_truck,
    delete_truck,
    get_active_trucks,
    get_inactive_trucks,
    get_trucks,
    update_truck,
)
from haulops.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/trucks", tags=["trucks"])

SupabaseDep = Annotated[Client, Depends(get_supabase_client)]
ContextDep = Annotated[DataContext, Depends(get_data_context)]


@router.get("", response_model=TruckListResponse, summary="List trucks")
async def list_trucks(supabase_client: SupabaseDep) -> TruckListResponse:
    trucks = await get_trucks(supabase_client)
    return TruckListResponse(trucks=trucks, count=len(trucks))


@router.get("/active", response_model=TruckListResponse, summary="List trucks assigned to a project")
async def list_active_trucks(supabase_client: SupabaseDep, ctx: ContextDep) -> TruckListResponse:
    columns = await ctx.columns.get(supabase_client, "trucks")
    trucks = await get_active_trucks(supabase_client, columns)
    return TruckListResponse(trucks=trucks, count=len(trucks))


@router.get("/inactive", response_model=TruckListResponse, summary="List idle trucks")
async def list_inactive_trucks(supabase_client: SupabaseDep, ctx: ContextDep) -> TruckListResponse:
    columns = await ctx.columns.get(supabase_client, "trucks")
    trucks = await get_inactive_trucks(supabase_client, columns)
    return TruckListResponse(trucks=trucks, count=len(trucks))


@router.get(
    "/schema",
    response_model=SchemaCheckResponse,
    summary="Check trucks table columns",
    description="""
    Probe the live ``trucks`` table for the historically renamed columns.

    When verification keeps failing the response is marked ``degraded`` and
    reports the legacy column names that writes will assume.
    """
)
async def check_trucks_schema(supabase_client: SupabaseDep) -> SchemaCheckResponse:
    try:
        columns = await verify_table_schema(
            supabase_client,
            "trucks",
            attempts=settings.SCHEMA_PROBE_ATTEMPTS,
            delay_seconds=settings.SCHEMA_PROBE_DELAY_SECONDS,
        )
    except SchemaVerificationUnavailable as e:
        logger.error(f"Trucks schema check unavailable: {e}")
        return SchemaCheckResponse(
            columns=ColumnAvailability.permissive().to_dict(),
            missing=[],
            degraded=True,
            message="Could not verify the database schema. Some features may not work correctly."
        )

    missing = missing_column_groups(columns)
    message = None
    if missing:
        message = f"Missing columns: {', '.join(missing)}. Some features may not work correctly."
        logger.warning(message)

    return SchemaCheckResponse(columns=columns.to_dict(), missing=missing, message=message)


@router.post("/schema/repair", response_model=SchemaRepairResponse, summary="Repair trucks table columns")
async def repair_schema(supabase_client: SupabaseDep) -> SchemaRepairResponse:
    repaired = await repair_trucks_schema(supabase_client)
    return SchemaRepairResponse(repaired=repaired)


@router.post(
    "",
    response_model=TruckResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create truck"
)
async def create_new_truck(
    request: TruckCreateRequest,
    supabase_client: SupabaseDep,
    ctx: ContextDep
) -> TruckResponse:
    columns = await ctx.columns.get(supabase_client, "trucks")
    result = await create_truck(supabase_client, request.model_dump(exclude_none=True), columns)

    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "create_error", "details": result.error}
        )

    return TruckResponse(truck=result.data)


@router.patch("/{truck_id}", response_model=TruckResponse, summary="Update truck")
async def update_existing_truck(
    request: TruckUpdateRequest,
    supabase_client: SupabaseDep,
    ctx: ContextDep,
    truck_id: int = Path(..., description="Truck id")
) -> TruckResponse:
    changes = request.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_request", "details": "No fields provided for update"}
        )

    columns = await ctx.columns.get(supabase_client, "trucks")
    result = await update_truck(supabase_client, truck_id, changes, columns)

    if result.error == NO_WRITABLE_FIELDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_request", "details": result.error}
        )
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "update_error", "details": result.error}
        )
    if result.data is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "details": f"Truck {truck_id} not found"}
        )

    return TruckResponse(truck=result.data)


@router.delete("/{truck_id}", response_model=TruckResponse, summary="Delete truck")
async def delete_existing_truck(
    supabase_client: SupabaseDep,
    truck_id: int = Path(..., description="Truck id")
) -> TruckResponse:
    result = await delete_truck(supabase_client, truck_id)

    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "delete_error", "details": result.error}
        )
    if result.data is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "details": f"Truck {truck_id} not found"}
        )

    return TruckResponse(truck=result.data)
