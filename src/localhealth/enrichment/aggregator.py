"""
Indicator Data Aggregator

Retrieves the three datasets needed to normalize an area's indicators
(latest readings, metadata, national statistics) concurrently.
"""
import asyncio
from typing import Dict, List, Protocol

from src.localhealth.utils.logger import get_logger
from src.localhealth.models.area import Area
from src.localhealth.models.indicator import (
    IndicatorDataset,
    IndicatorMetadataEntry,
    IndicatorStatisticsEntry,
    RawIndicatorRecord,
)
from src.localhealth.scrapers.fingertips_client import ProviderRequestError

logger = get_logger(__name__)


class IndicatorDataProvider(Protocol):
    async def fetch_latest_data(self, area_code: str) -> List[RawIndicatorRecord]:
        ...

    async def fetch_indicator_metadata(self) -> Dict[int, IndicatorMetadataEntry]:
        ...

    async def fetch_indicator_statistics(self) -> List[IndicatorStatisticsEntry]:
        ...


class AggregationError(Exception):
    """At least one of the three indicator datasets could not be retrieved."""


class IndicatorDataAggregator:
    """
    Fetches raw readings, metadata and statistics for an area in parallel.

    All-or-nothing: if any request fails the others are cancelled and
    AggregationError is raised. No retries.
    """

    def __init__(self, provider: IndicatorDataProvider):
        """
        Initialize aggregator.

        Args:
            provider: Object exposing the three fetch coroutines
        """
        self.provider = provider

    async def fetch(self, area: Area) -> IndicatorDataset:
        """
        Retrieve every dataset needed to normalize indicators for an area.

        Args:
            area: Resolved area

        Returns:
            IndicatorDataset with the statistics index built

        Raises:
            AggregationError: If any of the three requests fails
        """
        logger.info("fetching_indicator_datasets", area_code=area.code, area_name=area.name)

        tasks = [
            asyncio.ensure_future(self.provider.fetch_latest_data(area.code)),
            asyncio.ensure_future(self.provider.fetch_indicator_metadata()),
            asyncio.ensure_future(self.provider.fetch_indicator_statistics()),
        ]

        try:
            raw, metadata, stats = await asyncio.gather(*tasks)
        except ProviderRequestError as e:
            await _cancel_all(tasks)
            logger.error(
                "indicator_aggregation_failed",
                area_code=area.code,
                endpoint=e.endpoint,
                error=str(e)
            )
            raise AggregationError(f"Failed to fetch indicator data for {area.code}") from e
        except BaseException:
            await _cancel_all(tasks)
            raise

        dataset = IndicatorDataset(raw=raw, metadata=metadata, stats=stats)

        logger.info(
            "indicator_datasets_fetched",
            area_code=area.code,
            raw_records=len(dataset.raw),
            metadata_entries=len(dataset.metadata),
            statistics_entries=len(dataset.stats)
        )

        return dataset


async def _cancel_all(tasks: List[asyncio.Future]) -> None:
    """Cancel outstanding tasks and collect every outcome, including late failures."""
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
