"""
Tests for operator service: cached listing and invalidation on every mutation.
"""

from typing import Any

import pytest

from haulops.services.cache import MISSING, ReadThroughCache
from haulops.services.operator_service import (
    OPERATORS_CACHE_KEY,
    check_login_exists,
    create_operator,
    delete_operator,
    get_operators,
    update_operator,
    update_operator_projects,
    update_operator_trucks,
)


class MockSupabaseResponse:
    """Mock Supabase API response object."""
    def __init__(self, data: Any = None):
        self.data = data


@pytest.fixture
def cache():
    return ReadThroughCache()


@pytest.fixture
def operators():
    return [
        {"id": 1, "name": "Ana", "login": "ana", "trucks": [{"id": 3}], "projects": []},
        {"id": 2, "name": "Bruno", "login": "bruno", "trucks": [], "projects": [{"id": 9}]},
    ]


def prime(cache: ReadThroughCache) -> None:
    from haulops.db.query import QueryResult
    cache.set(OPERATORS_CACHE_KEY, QueryResult(data=[{"id": 1}]))


class TestGetOperators:

    @pytest.mark.asyncio
    async def test_second_read_is_served_from_cache(self, supabase_client, cache, operators):
        supabase_client.rpc.return_value.execute.return_value = MockSupabaseResponse(data=operators)

        first = await get_operators(supabase_client, cache)
        second = await get_operators(supabase_client, cache)

        assert first.data == operators
        assert second.data == operators
        supabase_client.rpc.assert_called_once_with("get_operators_joined", {})

    @pytest.mark.asyncio
    async def test_errors_are_returned_and_not_cached(self, supabase_client, cache, operators):
        supabase_client.rpc.return_value.execute.side_effect = [
            Exception("rpc unavailable"),
            MockSupabaseResponse(data=operators),
        ]

        failed = await get_operators(supabase_client, cache)
        recovered = await get_operators(supabase_client, cache)

        assert failed.error == "rpc unavailable"
        assert failed.data is None
        assert recovered.data == operators

    @pytest.mark.asyncio
    async def test_expired_entry_is_refetched(self, supabase_client, operators):
        now = [0.0]
        cache = ReadThroughCache(clock=lambda: now[0])
        supabase_client.rpc.return_value.execute.return_value = MockSupabaseResponse(data=operators)

        await get_operators(supabase_client, cache, max_age_ms=60_000)
        now[0] = 60_001
        await get_operators(supabase_client, cache, max_age_ms=60_000)

        assert supabase_client.rpc.call_count == 2


class TestInvalidation:

    @pytest.mark.asyncio
    async def test_create_invalidates(self, supabase_client, cache):
        prime(cache)
        supabase_client.table.return_value.insert.return_value.execute.return_value = (
            MockSupabaseResponse(data=[{"id": 5}])
        )

        result = await create_operator(supabase_client, cache, {"name": "Caio", "login": "caio"})

        assert result.first() == {"id": 5}
        assert cache.get(OPERATORS_CACHE_KEY, 60_000) is MISSING

    @pytest.mark.asyncio
    async def test_update_invalidates(self, supabase_client, cache):
        prime(cache)

        await update_operator(supabase_client, cache, 1, {"phone": "+55 11 90000-0000"})

        assert cache.get(OPERATORS_CACHE_KEY, 60_000) is MISSING
        supabase_client.table.return_value.update.return_value.eq.assert_called_once_with("id", 1)

    @pytest.mark.asyncio
    async def test_delete_invalidates(self, supabase_client, cache):
        prime(cache)

        await delete_operator(supabase_client, cache, 1)

        assert cache.get(OPERATORS_CACHE_KEY, 60_000) is MISSING

    @pytest.mark.asyncio
    async def test_failed_mutation_still_invalidates(self, supabase_client, cache):
        prime(cache)
        supabase_client.table.return_value.delete.return_value.eq.return_value.execute.side_effect = (
            Exception("foreign key violation")
        )

        result = await delete_operator(supabase_client, cache, 1)

        assert result.error == "foreign key violation"
        assert cache.get(OPERATORS_CACHE_KEY, 60_000) is MISSING

    @pytest.mark.asyncio
    async def test_link_updates_invalidate(self, supabase_client, cache):
        prime(cache)
        await update_operator_trucks(supabase_client, cache, 1, [3])
        assert cache.get(OPERATORS_CACHE_KEY, 60_000) is MISSING

        prime(cache)
        await update_operator_projects(supabase_client, cache, 1, [])
        assert cache.get(OPERATORS_CACHE_KEY, 60_000) is MISSING


class TestLinks:

    @pytest.mark.asyncio
    async def test_trucks_replaced(self, supabase_client, cache):
        table = supabase_client.table.return_value

        result = await update_operator_trucks(supabase_client, cache, 4, [3, 8])

        assert result.ok
        table.delete.return_value.eq.assert_called_once_with("operator_id", 4)
        table.insert.assert_called_once_with([
            {"operator_id": 4, "truck_id": 3},
            {"operator_id": 4, "truck_id": 8},
        ])
        tables = [c[0][0] for c in supabase_client.table.call_args_list]
        assert tables == ["operator_trucks", "operator_trucks"]

    @pytest.mark.asyncio
    async def test_empty_project_list_only_clears(self, supabase_client, cache):
        table = supabase_client.table.return_value

        result = await update_operator_projects(supabase_client, cache, 4, [])

        assert result.ok
        supabase_client.table.assert_called_once_with("operator_projects")
        table.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_clear_failure_skips_insert(self, supabase_client, cache):
        table = supabase_client.table.return_value
        table.delete.return_value.eq.return_value.execute.side_effect = Exception("permission denied")

        result = await update_operator_projects(supabase_client, cache, 4, [9])

        assert result.error == "permission denied"
        table.insert.assert_not_called()


class TestCheckLoginExists:

    @pytest.mark.asyncio
    async def test_existing_login(self, supabase_client):
        query = supabase_client.table.return_value.select.return_value.eq.return_value
        query.limit.return_value.execute.return_value = MockSupabaseResponse(data=[{"id": 1}])

        assert await check_login_exists(supabase_client, "ana") is True
        supabase_client.table.return_value.select.return_value.eq.assert_called_once_with("login", "ana")

    @pytest.mark.asyncio
    async def test_unknown_login(self, supabase_client):
        query = supabase_client.table.return_value.select.return_value.eq.return_value
        query.limit.return_value.execute.return_value = MockSupabaseResponse(data=[])

        assert await check_login_exists(supabase_client, "nobody") is False

    @pytest.mark.asyncio
    async def test_lookup_error_is_false(self, supabase_client):
        query = supabase_client.table.return_value.select.return_value.eq.return_value
        query.limit.return_value.execute.side_effect = Exception("timeout")

        assert await check_login_exists(supabase_client, "ana") is False
