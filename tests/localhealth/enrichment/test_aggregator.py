"""
Unit tests for the indicator data aggregator
"""
import asyncio
import gc

import pytest

from src.localhealth.enrichment.aggregator import AggregationError, IndicatorDataAggregator
from src.localhealth.models.area import Area
from src.localhealth.models.indicator import (
    DataPoint,
    IndicatorDataset,
    IndicatorMetadataEntry,
    IndicatorStatisticsEntry,
    RawIndicatorRecord,
)
from src.localhealth.scrapers.fingertips_client import ProviderRequestError


MANCHESTER = Area(code="E08000003", name="Manchester", short_name="Manchester", area_type_id=402)


class FakeIndicatorProvider:
    """
    Indicator provider whose three fetches only finish once all three have started.

    A sequential implementation would never get past the first fetch.
    """

    def __init__(self, failing=(), hang=None):
        self.failing = set(failing)
        self.hang = hang
        self.started = []
        self.cancelled = []
        self.all_started = asyncio.Event()

    async def _enter(self, name):
        self.started.append(name)
        if len(self.started) == 3:
            self.all_started.set()
        await self.all_started.wait()
        if name in self.failing:
            raise ProviderRequestError(f"/{name}", "503 Service Unavailable")
        if name == self.hang:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled.append(name)
                raise

    async def fetch_latest_data(self, area_code):
        await self._enter("latest_data")
        return [
            RawIndicatorRecord(
                iid=1,
                local_data_points=[DataPoint(value="5")],
                comparator_data_points=[DataPoint(value="4")],
            )
        ]

    async def fetch_indicator_metadata(self):
        await self._enter("metadata")
        return {1: IndicatorMetadataEntry(iid=1, name="Indicator", unit="%")}

    async def fetch_indicator_statistics(self):
        await self._enter("statistics")
        return [
            IndicatorStatisticsEntry(iid=1, min=1.0, max=9.0),
            IndicatorStatisticsEntry(iid=1, min=100.0, max=900.0),
        ]


class TestIndicatorDataAggregator:
    """Tests for IndicatorDataAggregator class"""

    def test_fetch_runs_requests_concurrently(self):
        """Test all three datasets are requested together and joined"""
        async def scenario():
            provider = FakeIndicatorProvider()
            dataset = await asyncio.wait_for(IndicatorDataAggregator(provider).fetch(MANCHESTER), timeout=2)
            return provider, dataset

        provider, dataset = asyncio.run(scenario())

        assert sorted(provider.started) == ["latest_data", "metadata", "statistics"]
        assert isinstance(dataset, IndicatorDataset)
        assert [record.iid for record in dataset.raw] == [1]
        assert set(dataset.metadata) == {1}
        assert len(dataset.stats) == 2

    def test_statistics_index_keeps_first_entry(self):
        """Test the statistics index matches a first-match scan"""
        async def scenario():
            return await IndicatorDataAggregator(FakeIndicatorProvider()).fetch(MANCHESTER)

        dataset = asyncio.run(scenario())

        assert dataset.stats_by_iid[1].min == 1.0
        assert dataset.stats_by_iid[1].max == 9.0

    def test_single_failure_fails_whole_aggregation(self):
        """Test a failed metadata request surfaces no partial data"""
        async def scenario():
            provider = FakeIndicatorProvider(failing=["metadata"])
            await IndicatorDataAggregator(provider).fetch(MANCHESTER)

        with pytest.raises(AggregationError) as exc_info:
            asyncio.run(scenario())

        assert isinstance(exc_info.value.__cause__, ProviderRequestError)

    def test_failure_cancels_outstanding_requests(self):
        """Test siblings still in flight are cancelled when one request fails"""
        provider = None

        async def scenario():
            nonlocal provider
            provider = FakeIndicatorProvider(failing=["statistics"], hang="latest_data")
            try:
                await IndicatorDataAggregator(provider).fetch(MANCHESTER)
            finally:
                await asyncio.sleep(0.01)

        with pytest.raises(AggregationError):
            asyncio.run(scenario())

        assert provider.cancelled == ["latest_data"]

    def test_concurrent_failures_are_all_retrieved(self):
        """Test a second failing request does not leave an unretrieved task exception"""
        loop_errors = []

        async def scenario():
            asyncio.get_running_loop().set_exception_handler(
                lambda loop, context: loop_errors.append(context)
            )
            provider = FakeIndicatorProvider(failing=["metadata", "statistics"])
            try:
                await IndicatorDataAggregator(provider).fetch(MANCHESTER)
            except AggregationError:
                pass
            await asyncio.sleep(0.01)
            gc.collect()
            return provider

        provider = asyncio.run(scenario())

        assert sorted(provider.started) == ["latest_data", "metadata", "statistics"]
        assert loop_errors == []
