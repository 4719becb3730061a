"""
Tests for /dashboard endpoints and /health.
"""

from datetime import date, timedelta
from typing import Any


class MockSupabaseResponse:
    """Mock Supabase API response object."""
    def __init__(self, data: Any = None):
        self.data = data


class TestDailyVolume:

    def test_server_rows(self, api_client, supabase_client):
        supabase_client.rpc.return_value.execute.return_value = MockSupabaseResponse(
            data=[{"date": "2026-10-18", "total_volume": 40}]
        )

        response = api_client.get("/dashboard/daily-volume?days=1")

        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "server"
        assert data["points"] == [{"date": "2026-10-18", "total_volume": 40}]

    def test_everything_down_still_returns_full_window(self, api_client, supabase_client):
        supabase_client.rpc.return_value.execute.side_effect = Exception("rpc down")
        supabase_client.table.side_effect = Exception("network down")

        response = api_client.get("/dashboard/daily-volume?days=3")

        assert response.status_code == 200
        data = response.json()
        today = date.today()
        assert data["source"] == "placeholder"
        assert [p["date"] for p in data["points"]] == [
            (today - timedelta(days=2)).isoformat(),
            (today - timedelta(days=1)).isoformat(),
            today.isoformat(),
        ]
        assert all(p["total_volume"] == 0 for p in data["points"])

    def test_days_must_be_positive(self, api_client):
        response = api_client.get("/dashboard/daily-volume?days=0")

        assert response.status_code == 422


class TestTrips:

    def test_ongoing_trips_error_is_empty_list(self, api_client, supabase_client):
        supabase_client.table.side_effect = Exception("network down")

        response = api_client.get("/dashboard/trips/ongoing")

        assert response.status_code == 200
        assert response.json() == {"trips": [], "count": 0}


def test_health(api_client):
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "haulops-backend"}
