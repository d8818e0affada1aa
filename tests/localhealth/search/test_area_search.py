"""
Unit tests for area_search module
"""
import asyncio

from src.localhealth.models.area import Area
from src.localhealth.search.area_search import (
    AREA_SEARCH_FAILED_MESSAGE,
    AreaSearchClient,
    CancellationToken,
    select_best_area,
)


def make_area(code, name, short_name, area_type_id=402):
    return Area(code=code, name=name, short_name=short_name, area_type_id=area_type_id)


class TestCancellationToken:
    """Tests for CancellationToken"""

    def test_token_starts_active(self):
        """Test a new token is not cancelled"""
        assert CancellationToken().cancelled is False

    def test_cancel_sets_flag_and_wakes_waiters(self):
        """Test cancel() wakes a pending wait()"""
        async def scenario():
            token = CancellationToken()
            waiter = asyncio.create_task(token.wait())
            await asyncio.sleep(0)
            token.cancel()
            await asyncio.wait_for(waiter, timeout=1)
            return token

        assert asyncio.run(scenario()).cancelled is True


class TestAreaSearchClient:
    """Tests for AreaSearchClient class"""

    def test_short_query_does_not_call_provider(self, area_provider):
        """Test queries of 2 characters or fewer return [] without a lookup"""
        provider = area_provider()
        client = AreaSearchClient(provider, debounce_seconds=0)

        result = asyncio.run(client.search("Ma"))

        assert result == []
        assert provider.queries == []
        assert client.areas == []

    def test_query_is_stripped_before_length_check(self, area_provider):
        """Test surrounding whitespace does not count toward query length"""
        provider = area_provider()
        client = AreaSearchClient(provider, debounce_seconds=0)

        assert asyncio.run(client.search("  ab  ")) == []
        assert provider.queries == []

    def test_search_returns_areas_and_updates_state(self, area_provider):
        """Test a settled query reaches the provider and is applied"""
        provider = area_provider()
        client = AreaSearchClient(provider, debounce_seconds=0)

        result = asyncio.run(client.search(" Manchester "))

        assert provider.queries == ["Manchester"]
        assert [area.code for area in result] == ["E08000003"]
        assert client.areas == result

    def test_debounce_submits_only_latest_query(self, area_provider):
        """Test a query superseded during the debounce delay is never submitted"""
        provider = area_provider()

        async def scenario():
            client = AreaSearchClient(provider, debounce_seconds=0.05)
            first = asyncio.create_task(client.search("Manc"))
            await asyncio.sleep(0.01)
            second = asyncio.create_task(client.search("Manchester"))
            return await first, await second, client

        first_result, second_result, client = asyncio.run(scenario())

        assert first_result == []
        assert provider.queries == ["Manchester"]
        assert len(second_result) == 1
        assert client.areas == second_result

    def test_in_flight_request_cancelled_by_newer_query(self, area_provider):
        """Test a newer query cancels an in-flight request and its result is discarded"""
        salford = make_area("E08000006", "Salford", "Salford")
        provider = area_provider(block=True)

        async def scenario():
            client = AreaSearchClient(provider, debounce_seconds=0)
            first = asyncio.create_task(client.search("Manchester"))
            await asyncio.sleep(0.01)
            assert provider.queries == ["Manchester"]

            provider.block = False
            provider.areas = [salford]
            second = asyncio.create_task(client.search("Salford"))
            first_result = await first
            second_result = await second
            await asyncio.sleep(0.01)
            return first_result, second_result, client

        first_result, second_result, client = asyncio.run(scenario())

        assert first_result == []
        assert second_result == [salford]
        assert client.areas == [salford]
        assert provider.cancelled == ["Manchester"]

    def test_short_query_cancels_pending_search(self, area_provider):
        """Test clearing the search box cancels a pending lookup"""
        provider = area_provider()

        async def scenario():
            client = AreaSearchClient(provider, debounce_seconds=0.05)
            pending = asyncio.create_task(client.search("Manchester"))
            await asyncio.sleep(0.01)
            cleared = await client.search("")
            return await pending, cleared, client

        pending_result, cleared_result, client = asyncio.run(scenario())

        assert pending_result == []
        assert cleared_result == []
        assert provider.queries == []
        assert client.areas == []

    def test_provider_failure_notifies_and_clears(self, area_provider):
        """Test a failed lookup notifies once and yields no areas"""
        provider = area_provider(fail=True)
        messages = []
        client = AreaSearchClient(provider, debounce_seconds=0, notify=messages.append)
        client.areas = [make_area("E08000003", "Manchester", "Manchester")]

        result = asyncio.run(client.search("Manchester"))

        assert result == []
        assert client.areas == []
        assert messages == [AREA_SEARCH_FAILED_MESSAGE]


class TestSelectBestArea:
    """Tests for select_best_area"""

    def test_short_name_exact_match_beats_first_candidate(self):
        """Test an exact short-name match wins over a non-matching first candidate"""
        candidates = [
            make_area("E47000001", "Greater Manchester Combined Authority", "Greater Manchester", 502),
            make_area("E08000003", "Manchester City Council", "Manchester"),
        ]

        selected = select_best_area(candidates, "Manchester")

        assert selected.code == "E08000003"

    def test_full_name_match_is_case_insensitive(self):
        """Test full-name matches ignore case"""
        candidates = [
            make_area("E06000001", "Hartlepool", "Hartlepool"),
            make_area("E08000006", "Salford", "Salford City"),
        ]

        assert select_best_area(candidates, "SALFORD").code == "E08000006"

    def test_falls_back_to_first_candidate(self):
        """Test the provider's first candidate is used without an exact match"""
        candidates = [
            make_area("E07000117", "Burnley", "Burnley"),
            make_area("E07000118", "Chorley", "Chorley"),
        ]

        assert select_best_area(candidates, "Lancashire").code == "E07000117"

    def test_empty_candidates_returns_none(self):
        """Test no candidates is a resolution failure, not an error"""
        assert select_best_area([], "Manchester") is None
