"""
Fingertips Public Health API Client

Fetches area search results, latest indicator data, indicator metadata and
indicator statistics from the Fingertips API (fingertips.phe.org.uk).
"""
from typing import Any, Dict, Iterable, List, Optional

import httpx
from pydantic import ValidationError

from config.settings import settings
from src.localhealth.utils.logger import get_logger
from src.localhealth.models.area import Area
from src.localhealth.models.indicator import (
    DEFAULT_PERIOD,
    DataPoint,
    IndicatorMetadataEntry,
    IndicatorStatisticsEntry,
    RawIndicatorRecord,
)

logger = get_logger(__name__)


class ProviderRequestError(Exception):
    """A provider request failed (transport error, non-success status or bad JSON)."""

    def __init__(self, endpoint: str, message: str):
        super().__init__(f"{endpoint}: {message}")
        self.endpoint = endpoint


class FingertipsClient:
    """
    Async client for the Fingertips REST API.

    Every method issues exactly one request and raises ProviderRequestError on
    failure; callers decide whether a failure is fatal. Provider items that do
    not validate are skipped with a warning.
    """

    AREA_SEARCH = "/area_search"
    LATEST_DATA = "/latest_data/all_indicators_in_profile_group_for_child_areas"
    INDICATOR_METADATA = "/indicator_metadata/by_group_id"
    INDICATOR_STATISTICS = "/indicator_statistics/by_profile_id"

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ):
        """
        Initialize the Fingertips client.

        Args:
            base_url: Override the default API URL (for testing)
            client: Pre-built httpx client (for testing with MockTransport)
            timeout: Request timeout in seconds (default from settings)
        """
        self.base_url = (base_url or settings.fingertips_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.client = client or httpx.AsyncClient(timeout=self.timeout)
        logger.info("fingertips_client_initialized", base_url=self.base_url)

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self.client.aclose()

    async def _get(self, endpoint: str, params: Dict[str, Any]) -> Any:
        """
        Make GET request to the API.

        Args:
            endpoint: API endpoint path
            params: Query parameters (cache-buster version is added)

        Returns:
            Decoded JSON response

        Raises:
            ProviderRequestError: If the request fails or returns invalid JSON
        """
        url = f"{self.base_url}{endpoint}"
        query = {"v": settings.fingertips_api_version, **params}

        try:
            response = await self.client.get(url, params=query)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.error(
                "api_request_failed",
                endpoint=endpoint,
                error=str(e),
                error_type=type(e).__name__
            )
            raise ProviderRequestError(endpoint, str(e)) from e
        except ValueError as e:
            logger.error("api_response_not_json", endpoint=endpoint, error=str(e))
            raise ProviderRequestError(endpoint, "response is not valid JSON") from e

        logger.debug(
            "api_request_successful",
            endpoint=endpoint,
            status_code=response.status_code
        )
        return payload

    async def search_areas(self, search_text: str) -> List[Area]:
        """
        Search for areas by free text.

        Args:
            search_text: Area name or code

        Returns:
            Areas in provider order
        """
        payload = await self._get(
            self.AREA_SEARCH,
            {
                "area_type_ids": settings.fingertips_area_type_ids,
                "search_text": search_text,
            }
        )
        areas = self._parse_areas(_as_items(payload))

        logger.info("area_search_complete", search_text=search_text, results=len(areas))
        return areas

    async def fetch_latest_data(self, area_code: str) -> List[RawIndicatorRecord]:
        """
        Fetch the latest reading of every indicator in the profile group for an area.

        Args:
            area_code: Provider area code

        Returns:
            Raw indicator records in provider order
        """
        payload = await self._get(
            self.LATEST_DATA,
            {
                "area_type_id": settings.fingertips_child_area_type_id,
                "profile_id": settings.fingertips_profile_id,
                "parent_area_code": settings.national_area_code,
                "group_id": settings.fingertips_group_id,
                "child_area_code": area_code,
            }
        )
        return self._parse_raw_records(_as_items(payload))

    async def fetch_indicator_metadata(self) -> Dict[int, IndicatorMetadataEntry]:
        """
        Fetch metadata for every indicator in the configured group.

        Returns:
            Dictionary of iid -> metadata entry
        """
        payload = await self._get(
            self.INDICATOR_METADATA,
            {
                "include_system_content": "yes",
                "include_definition": "yes",
                "group_ids": settings.fingertips_group_id,
            }
        )
        return self._parse_metadata(_as_items(payload))

    async def fetch_indicator_statistics(self) -> List[IndicatorStatisticsEntry]:
        """
        Fetch national min/max statistics for the configured profile.

        Returns:
            Statistics entries in provider order (not indexed)
        """
        payload = await self._get(
            self.INDICATOR_STATISTICS,
            {
                "parent_area_code": settings.national_area_code,
                "child_area_type_id": settings.fingertips_child_area_type_id,
                "group_id": settings.fingertips_group_id,
                "profile_id": settings.fingertips_profile_id,
            }
        )
        return self._parse_statistics(_as_items(payload))

    def _parse_areas(self, items: Iterable[Any]) -> List[Area]:
        areas = []
        for item in items:
            try:
                areas.append(Area(
                    code=item.get("Code"),
                    name=item.get("Name"),
                    short_name=item.get("Short") or "",
                    area_type_id=item.get("AreaTypeId"),
                ))
            except (AttributeError, ValidationError) as e:
                logger.warning("area_validation_failed", error=str(e), raw_data=item)
        return areas

    def _parse_raw_records(self, items: Iterable[Any]) -> List[RawIndicatorRecord]:
        """
        Parse latest-data items.

        Local readings come from "Data"; the national comparator lives under
        each grouping's "ComparatorData".
        """
        records = []
        validation_errors = 0

        for item in items:
            try:
                groupings = item.get("Grouping") or []
                period = item.get("Period")
                if not period and groupings:
                    period = groupings[0].get("Period")

                records.append(RawIndicatorRecord(
                    iid=item.get("IID"),
                    period=period or DEFAULT_PERIOD,
                    local_data_points=[
                        DataPoint(value=_as_text(point.get("Val")))
                        for point in item.get("Data") or []
                    ],
                    comparator_data_points=[
                        DataPoint(value=_as_text((grouping.get("ComparatorData") or {}).get("Val")))
                        for grouping in groupings
                    ],
                ))
            except (AttributeError, ValidationError) as e:
                validation_errors += 1
                logger.warning("indicator_record_validation_failed", error=str(e))

        if validation_errors > 0:
            logger.warning(
                "validation_errors_occurred",
                dataset="latest_data",
                total_errors=validation_errors,
                success_count=len(records)
            )

        return records

    def _parse_metadata(self, items: Iterable[Any]) -> Dict[int, IndicatorMetadataEntry]:
        metadata = {}
        for item in items:
            try:
                descriptive = item.get("Descriptive") or {}
                unit = item.get("Unit") or {}
                entry = IndicatorMetadataEntry(
                    iid=item.get("IID"),
                    name=descriptive.get("Name") or "",
                    definition=descriptive.get("Definition") or "",
                    unit=unit.get("Label") or "",
                    polarity_id=_as_int(item.get("PolarityId")),
                )
            except (AttributeError, ValidationError) as e:
                logger.warning("indicator_metadata_validation_failed", error=str(e))
                continue
            metadata[entry.iid] = entry
        return metadata

    def _parse_statistics(self, items: Iterable[Any]) -> List[IndicatorStatisticsEntry]:
        stats = []
        for item in items:
            try:
                values = item.get("Stats") or {}
                stats.append(IndicatorStatisticsEntry(
                    iid=item.get("IID"),
                    min=values.get("Min"),
                    max=values.get("Max"),
                ))
            except (AttributeError, ValidationError) as e:
                logger.warning("indicator_statistics_validation_failed", error=str(e))
        return stats


def _as_items(payload: Any) -> List[Any]:
    """Provider collections are either JSON arrays or objects keyed by id."""
    if isinstance(payload, dict):
        return list(payload.values())
    if isinstance(payload, list):
        return payload
    return []


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
