"""
Dashboard API endpoints.

Daily transported volume always answers with one point per requested day,
even when both the server aggregation and the raw trip query fail.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from supabase import Client

from haulops.config import settings
from haulops.db.client import get_supabase_client
from haulops.schemas.dashboard import DailyVolumeResponse, TripListResponse
from haulops.services.trip_service import get_ongoing_trips, get_trip_history, resolve_daily_volume
from haulops.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

SupabaseDep = Annotated[Client, Depends(get_supabase_client)]


@router.get(
    "/daily-volume",
    response_model=DailyVolumeResponse,
    summary="Daily transported volume",
    description="Total volume of completed trips per day for the trailing window, oldest first."
)
async def daily_volume(
    supabase_client: SupabaseDep,
    days: int = Query(settings.DAILY_VOLUME_DEFAULT_DAYS, ge=1, le=90, description="Window size in days")
) -> DailyVolumeResponse:
    result = await resolve_daily_volume(supabase_client, days=days)
    if result.source != "server":
        logger.warning(f"Daily volume served by '{result.source}' strategy")
    return DailyVolumeResponse(days=days, source=result.source, points=result.points)


@router.get("/trips/ongoing", response_model=TripListResponse, summary="Ongoing trips")
async def ongoing_trips(supabase_client: SupabaseDep) -> TripListResponse:
    trips = await get_ongoing_trips(supabase_client)
    return TripListResponse(trips=trips, count=len(trips))


@router.get("/trips/history", response_model=TripListResponse, summary="Recent completed trips")
async def trip_history(
    supabase_client: SupabaseDep,
    limit: int = Query(10, ge=1, le=100, description="Days to look back and maximum trips returned")
) -> TripListResponse:
    trips = await get_trip_history(supabase_client, limit=limit)
    return TripListResponse(trips=trips, count=len(trips))
