"""
Health Indicator Service

Caller-facing operations of the local health-indicator pipeline:
area search, indicators for a known area, and address-to-indicators
resolution.
"""
from typing import Callable, List, Optional

from src.localhealth.utils.logger import get_logger, pipeline_context
from src.localhealth.models.area import Area
from src.localhealth.models.indicator import NormalizedIndicator
from src.localhealth.scrapers.fingertips_client import FingertipsClient, ProviderRequestError
from src.localhealth.search.area_search import AreaSearchClient, select_best_area
from src.localhealth.enrichment.aggregator import AggregationError, IndicatorDataAggregator
from src.localhealth.pipelines.normalization import IndicatorNormalizer
from src.localhealth.transformers.address_area_extractor import extract_area_name

logger = get_logger(__name__)

INDICATOR_FETCH_FAILED_MESSAGE = "Couldn't fetch data"


def log_notification(message: str) -> None:
    """Default failure notifier: the message is only logged."""
    logger.warning("user_notification", message=message)


class HealthIndicatorService:
    """
    Orchestrates address extraction, area search, aggregation and normalization.

    Network failures never raise out of this service: they produce a single
    notification through `notify` and an empty indicator list.
    """

    def __init__(
        self,
        client: Optional[FingertipsClient] = None,
        notify: Optional[Callable[[str], None]] = None,
        debounce_seconds: Optional[float] = None
    ):
        """
        Initialize the service.

        Args:
            client: Fingertips client (a default client is created if omitted)
            notify: Callback receiving user-facing failure messages
            debounce_seconds: Override the area search debounce delay
        """
        self.client = client or FingertipsClient()
        self.notify = notify or log_notification
        self.area_search = AreaSearchClient(
            self.client,
            debounce_seconds=debounce_seconds,
            notify=self.notify
        )
        self.aggregator = IndicatorDataAggregator(self.client)
        self.normalizer = IndicatorNormalizer()

    async def search_areas(self, text: str) -> List[Area]:
        """
        Debounced, cancellable area search.

        Args:
            text: Search text

        Returns:
            Matching areas ([] for short, superseded or failed searches)
        """
        return await self.area_search.search(text)

    async def fetch_indicators_for_area(self, area: Area) -> List[NormalizedIndicator]:
        """
        Fetch and normalize every indicator for an area.

        Args:
            area: Resolved area

        Returns:
            Ordered, deduplicated indicators, or [] if any dataset failed
        """
        with pipeline_context(area_code=area.code):
            try:
                dataset = await self.aggregator.fetch(area)
            except AggregationError as e:
                logger.error("indicator_fetch_failed", area_code=area.code, error=str(e))
                self.notify(INDICATOR_FETCH_FAILED_MESSAGE)
                return []

            return self.normalizer.normalize_dataset(dataset)

    async def resolve_area(self, address: str) -> Optional[Area]:
        """
        Resolve a property address to a reporting area.

        Args:
            address: Property address

        Returns:
            Best matching area, or None when resolution fails
        """
        area_name = extract_area_name(address)
        if not area_name:
            logger.info("area_resolution_failed", reason="no_locality", address=address)
            return None

        candidates = await self.search_areas(area_name)
        area = select_best_area(candidates, area_name)
        if area is None:
            logger.info("area_resolution_failed", reason="no_candidates", area_name=area_name)
            return None

        logger.info("area_resolved", area_name=area_name, area_code=area.code)
        return area

    async def resolve_and_fetch_indicators(self, address: str) -> List[NormalizedIndicator]:
        """
        Resolve an address to an area and fetch its indicators.

        Args:
            address: Property address (e.g., "8 Birch Road, Manchester, M1 3LP")

        Returns:
            Normalized indicators, or [] when the area cannot be resolved
        """
        with pipeline_context(address=address):
            area = await self.resolve_area(address)
            if area is None:
                return []
            return await self.fetch_indicators_for_area(area)

    async def find_area_by_code(self, area_code: str) -> Optional[Area]:
        """
        Look up an area by its provider code, bypassing the debounce.

        Args:
            area_code: Provider area code (e.g., "E08000003")

        Returns:
            Area with that code (or the first search hit), None if not found
        """
        try:
            candidates = await self.client.search_areas(area_code)
        except ProviderRequestError as e:
            logger.warning("area_lookup_failed", area_code=area_code, error=str(e))
            self.notify(INDICATOR_FETCH_FAILED_MESSAGE)
            return None

        for area in candidates:
            if area.code.casefold() == area_code.strip().casefold():
                return area
        return candidates[0] if candidates else None

    async def aclose(self) -> None:
        await self.client.aclose()
