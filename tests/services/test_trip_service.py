"""
Tests for the trip service: daily volume strategy chain and trip lists.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock

import pytest

from haulops.schemas.dashboard import DailyVolumePoint
from haulops.services.trip_service import (
    client_daily_volume,
    get_daily_volume,
    get_ongoing_trips,
    get_trip_history,
    placeholder_daily_volume,
    resolve_daily_volume,
    window_dates,
)

TODAY = date(2026, 10, 18)


class MockSupabaseResponse:
    """Mock Supabase API response object."""
    def __init__(self, data: Any = None):
        self.data = data


def trips_query(client: MagicMock) -> MagicMock:
    """The execute() mock for table().select().eq().gte().lte()."""
    return (
        client.table.return_value
        .select.return_value
        .eq.return_value
        .gte.return_value
        .lte.return_value
        .execute
    )


def dates_of(points):
    return [point.date for point in points]


def expected_dates(days: int):
    return [(TODAY - timedelta(days=offset)).isoformat() for offset in reversed(range(days))]


class TestServerStrategy:

    @pytest.mark.asyncio
    async def test_rpc_rows_returned_as_is(self, supabase_client):
        rows = [
            {"date": "2026-10-17", "total_volume": 30},
            {"date": "2026-10-18", "total_volume": 12.5},
        ]
        supabase_client.rpc.return_value.execute.return_value = MockSupabaseResponse(data=rows)

        result = await resolve_daily_volume(supabase_client, days=2, today=TODAY)

        assert result.source == "server"
        assert result.points == [
            DailyVolumePoint(date="2026-10-17", total_volume=30),
            DailyVolumePoint(date="2026-10-18", total_volume=12.5),
        ]
        supabase_client.rpc.assert_called_once_with("get_daily_volume", {"days_count": 2})
        supabase_client.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_rpc_rows_fall_through(self, supabase_client):
        supabase_client.rpc.return_value.execute.return_value = MockSupabaseResponse(
            data=[{"day": "2026-10-18"}]
        )
        trips_query(supabase_client).return_value = MockSupabaseResponse(data=[])

        result = await resolve_daily_volume(supabase_client, days=2, today=TODAY)

        assert result.source == "client"


class TestClientStrategy:

    @pytest.mark.asyncio
    async def test_buckets_by_end_date_and_fills_gaps(self, supabase_client):
        supabase_client.rpc.return_value.execute.side_effect = Exception("function not found")
        trips_query(supabase_client).return_value = MockSupabaseResponse(data=[
            {"volume": 10, "end_time": "2026-10-15T09:30:00"},
            {"volume": 5, "end_time": "2026-10-17T16:45:00"},
        ])

        result = await resolve_daily_volume(supabase_client, days=7, today=TODAY)

        assert result.source == "client"
        volumes = {point.date: point.total_volume for point in result.points}
        assert dates_of(result.points) == expected_dates(7)
        assert volumes["2026-10-15"] == 10
        assert volumes["2026-10-17"] == 5
        assert sum(volumes.values()) == 15

    @pytest.mark.asyncio
    async def test_accepts_trimmed_fractional_seconds_with_offset(self, supabase_client):
        supabase_client.rpc.return_value.execute.side_effect = Exception("function not found")
        trips_query(supabase_client).return_value = MockSupabaseResponse(data=[
            {"volume": 10, "end_time": "2026-10-17T12:00:00.12+00:00"},
            {"volume": 5, "end_time": "2026-10-18T12:00:00+00:00"},
        ])
        ended = [
            (10, datetime(2026, 10, 17, 12, 0, 0, 120000, tzinfo=timezone.utc)),
            (5, datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)),
        ]
        expected: dict = {}
        for volume, moment in ended:
            day = moment.astimezone().date().isoformat()
            expected[day] = expected.get(day, 0) + volume

        result = await resolve_daily_volume(supabase_client, days=3, today=TODAY)

        assert result.source == "client"
        volumes = {point.date: point.total_volume for point in result.points}
        for day in expected_dates(3):
            assert volumes[day] == expected.get(day, 0)

    @pytest.mark.asyncio
    async def test_sums_multiple_trips_per_day_and_skips_incomplete_rows(self, supabase_client):
        trips_query(supabase_client).return_value = MockSupabaseResponse(data=[
            {"volume": 8, "end_time": "2026-10-18T07:00:00"},
            {"volume": 4, "end_time": "2026-10-18T11:00:00"},
            {"volume": 3, "end_time": None},
            {"volume": None, "end_time": "2026-10-18T12:00:00"},
            {"volume": 99, "end_time": "2026-09-01T12:00:00"},
        ])

        points = await client_daily_volume(supabase_client, 3, TODAY)

        assert [p.total_volume for p in points] == [0, 0, 12]

    @pytest.mark.asyncio
    async def test_queries_completed_trips_in_window(self, supabase_client):
        trips_query(supabase_client).return_value = MockSupabaseResponse(data=[])

        await client_daily_volume(supabase_client, 3, TODAY)

        table = supabase_client.table.return_value
        supabase_client.table.assert_called_once_with("trips")
        table.select.assert_called_once_with("volume, end_time")
        table.select.return_value.eq.assert_called_once_with("status", "completed")
        start = table.select.return_value.eq.return_value.gte.call_args[0][1]
        assert start.startswith("2026-10-16T00:00:00")


class TestPlaceholderStrategy:

    @pytest.mark.asyncio
    async def test_both_tiers_fail_three_day_window(self, supabase_client):
        supabase_client.rpc.return_value.execute.side_effect = Exception("rpc down")
        trips_query(supabase_client).side_effect = Exception("network down")

        result = await resolve_daily_volume(supabase_client, days=3, today=TODAY)

        assert result.source == "placeholder"
        assert dates_of(result.points) == ["2026-10-16", "2026-10-17", "2026-10-18"]
        assert all(point.total_volume == 0 for point in result.points)

    def test_placeholder_shape_matches_real_points(self):
        points = placeholder_daily_volume(5, TODAY)

        assert all(isinstance(point, DailyVolumePoint) for point in points)
        assert dates_of(points) == expected_dates(5)


class TestWindow:

    @pytest.mark.parametrize("days", [1, 2, 7, 30])
    @pytest.mark.asyncio
    async def test_every_strategy_returns_days_consecutive_points(self, supabase_client, days):
        supabase_client.rpc.return_value.execute.side_effect = Exception("rpc down")
        trips_query(supabase_client).return_value = MockSupabaseResponse(data=[])

        client_points = await get_daily_volume(supabase_client, days=days, today=TODAY)
        placeholder_points = placeholder_daily_volume(days, TODAY)

        assert dates_of(client_points) == expected_dates(days)
        assert dates_of(placeholder_points) == expected_dates(days)

    def test_window_crosses_month_boundary(self):
        dates = window_dates(3, date(2026, 3, 1))

        assert dates == [date(2026, 2, 27), date(2026, 2, 28), date(2026, 3, 1)]

    @pytest.mark.asyncio
    async def test_rejects_empty_window(self, supabase_client):
        with pytest.raises(ValueError):
            await resolve_daily_volume(supabase_client, days=0, today=TODAY)

    @pytest.mark.asyncio
    async def test_custom_strategy_order_short_circuits(self, supabase_client):
        calls = []

        async def failing(client, days, today):
            calls.append("failing")
            raise RuntimeError("boom")

        async def working(client, days, today):
            calls.append("working")
            return placeholder_daily_volume(days, today)

        async def never(client, days, today):
            calls.append("never")
            return []

        result = await resolve_daily_volume(
            supabase_client,
            days=2,
            today=TODAY,
            strategies=[("server", failing), ("client", working), ("client", never)],
        )

        assert result.source == "client"
        assert calls == ["failing", "working"]


class TestTripLists:

    @pytest.mark.asyncio
    async def test_ongoing_trips(self, supabase_client):
        trips = [{"id": 1, "status": "ongoing", "trucks": {"name": "T-01"}}]
        query = supabase_client.table.return_value.select.return_value
        query.eq.return_value.order.return_value.execute.return_value = MockSupabaseResponse(data=trips)

        result = await get_ongoing_trips(supabase_client)

        assert result == trips
        query.eq.assert_called_once_with("status", "ongoing")
        query.eq.return_value.order.assert_called_once_with("start_time", desc=True)

    @pytest.mark.asyncio
    async def test_ongoing_trips_error_returns_empty(self, supabase_client):
        query = supabase_client.table.return_value.select.return_value
        query.eq.return_value.order.return_value.execute.side_effect = Exception("timeout")

        assert await get_ongoing_trips(supabase_client) == []

    @pytest.mark.asyncio
    async def test_trip_history_window_and_limit(self, supabase_client):
        now = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
        query = supabase_client.table.return_value.select.return_value.eq.return_value
        chain = query.gte.return_value.order.return_value.limit.return_value
        chain.execute.return_value = MockSupabaseResponse(data=[{"id": 9}])

        result = await get_trip_history(supabase_client, limit=5, now=now)

        assert result == [{"id": 9}]
        query.gte.assert_called_once_with("end_time", "2026-10-13T12:00:00+00:00")
        query.gte.return_value.order.return_value.limit.assert_called_once_with(5)

    @pytest.mark.asyncio
    async def test_trip_history_error_returns_empty(self, supabase_client):
        query = supabase_client.table.return_value.select.return_value.eq.return_value
        query.gte.return_value.order.return_value.limit.return_value.execute.side_effect = Exception("x")

        assert await get_trip_history(supabase_client) == []
