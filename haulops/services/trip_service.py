"""
Trip service.

Daily transported volume for the dashboard chart, plus ongoing trips and
recent trip history.

Daily volume is resolved by an ordered list of strategies; the first one
that succeeds wins and none is retried:
1. ``server``: the ``get_daily_volume`` RPC (rows returned as-is)
2. ``client``: aggregate completed trips fetched for the window
3. ``placeholder``: zero-volume points, so the chart always renders

Every strategy returns the same point shape, oldest day first.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, cast

from supabase import Client

from haulops.db.query import error_message
from haulops.schemas.dashboard import DailyVolumePoint

logger = logging.getLogger(__name__)

VolumeSource = Literal["server", "client", "placeholder"]


@dataclass
class DailyVolumeResult:
    """Daily volume points tagged with the strategy that produced them."""
    source: VolumeSource
    points: List[DailyVolumePoint]


def window_dates(days: int, today: date) -> List[date]:
    """The ``days`` calendar days ending today, oldest first."""
    start = today - timedelta(days=days - 1)
    return [start + timedelta(days=offset) for offset in range(days)]


def _local_date(timestamp: str) -> date:
    """Local calendar date of a stored ISO timestamp."""
    moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


async def server_daily_volume(
    supabase_client: Client,
    days: int,
    today: date
) -> List[DailyVolumePoint]:
    """Tier 1: precomputed aggregation; trusts the server's date buckets."""
    response = supabase_client.rpc("get_daily_volume", {"days_count": days}).execute()
    rows = response.data

    if rows is None:
        return []
    if not isinstance(rows, list):
        raise ValueError(f"Unexpected get_daily_volume payload: {type(rows).__name__}")

    return [
        DailyVolumePoint(date=str(row["date"]), total_volume=row.get("total_volume") or 0)
        for row in cast(List[Dict[str, Any]], rows)
    ]


async def client_daily_volume(
    supabase_client: Client,
    days: int,
    today: date
) -> List[DailyVolumePoint]:
    """Tier 2: sum completed-trip volumes per local end date."""
    dates = window_dates(days, today)
    start = datetime.combine(dates[0], time.min).astimezone()
    end = datetime.combine(today, time.max).astimezone()

    response = (
        supabase_client.table("trips")
        .select("volume, end_time")
        .eq("status", "completed")
        .gte("end_time", start.isoformat())
        .lte("end_time", end.isoformat())
        .execute()
    )

    volume_by_date: Dict[date, float] = {day: 0 for day in dates}
    for trip in cast(List[Dict[str, Any]], response.data or []):
        if not trip.get("end_time"):
            continue
        trip_date = _local_date(trip["end_time"])
        if trip_date in volume_by_date:
            volume_by_date[trip_date] += trip.get("volume") or 0

    return [
        DailyVolumePoint(date=day.isoformat(), total_volume=volume_by_date[day])
        for day in dates
    ]


def placeholder_daily_volume(days: int, today: date) -> List[DailyVolumePoint]:
    """Tier 3: zero-volume points; cannot fail."""
    return [
        DailyVolumePoint(date=day.isoformat(), total_volume=0)
        for day in window_dates(days, today)
    ]


VolumeStrategy = Callable[[Client, int, date], Awaitable[List[DailyVolumePoint]]]

VOLUME_STRATEGIES: List[tuple[VolumeSource, VolumeStrategy]] = [
    ("server", server_daily_volume),
    ("client", client_daily_volume),
]


async def resolve_daily_volume(
    supabase_client: Client,
    days: int = 7,
    today: Optional[date] = None,
    strategies: Optional[List[tuple[VolumeSource, VolumeStrategy]]] = None,
) -> DailyVolumeResult:
    """
    Resolve daily volume through the strategy chain.

    Args:
        supabase_client: Supabase client
        days: Size of the trailing window, including today
        today: Reference day (defaults to the local current date)
        strategies: Ordered fallible strategies (defaults to server, client)

    Returns:
        DailyVolumeResult tagged with the strategy that produced it

    Raises:
        ValueError: If days < 1
    """
    if days < 1:
        raise ValueError("days must be at least 1")

    today = today or date.today()

    for source, strategy in strategies if strategies is not None else VOLUME_STRATEGIES:
        try:
            points = await strategy(supabase_client, days, today)
        except Exception as e:
            logger.error(f"Daily volume strategy '{source}' failed: {error_message(e)}")
            continue

        logger.info(f"Daily volume for {days} days resolved by '{source}'")
        return DailyVolumeResult(source=source, points=points)

    logger.warning(f"All daily volume strategies failed; returning {days} placeholder points")
    return DailyVolumeResult(source="placeholder", points=placeholder_daily_volume(days, today))


async def get_daily_volume(
    supabase_client: Client,
    days: int = 7,
    today: Optional[date] = None
) -> List[DailyVolumePoint]:
    """Daily transported volume for the trailing window, oldest day first."""
    result = await resolve_daily_volume(supabase_client, days=days, today=today)
    return result.points


async def get_ongoing_trips(supabase_client: Client) -> List[Dict[str, Any]]:
    """Fetch ongoing trips with truck and project names, newest first."""
    try:
        response = (
            supabase_client.table("trips")
            .select("*, trucks(name), projects(name)")
            .eq("status", "ongoing")
            .order("start_time", desc=True)
            .execute()
        )
    except Exception as e:
        logger.error(f"Error fetching ongoing trips: {error_message(e)}")
        return []

    trips = cast(List[Dict[str, Any]], response.data or [])
    logger.info(f"Found {len(trips)} ongoing trips")
    return trips


async def get_trip_history(
    supabase_client: Client,
    limit: int = 10,
    now: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    """
    Fetch completed trips that ended within the last ``limit`` days.

    At most ``limit`` trips are returned, most recent first.
    """
    now = now or datetime.now().astimezone()
    since = now - timedelta(days=limit)

    try:
        response = (
            supabase_client.table("trips")
            .select("*, trucks(name), projects(name)")
            .eq("status", "completed")
            .gte("end_time", since.isoformat())
            .order("end_time", desc=True)
            .limit(limit)
            .execute()
        )
    except Exception as e:
        logger.error(f"Error fetching trip history: {error_message(e)}")
        return []

    return cast(List[Dict[str, Any]], response.data or [])
