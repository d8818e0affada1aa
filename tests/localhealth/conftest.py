"""
Shared fixtures for local health indicator tests
"""
import asyncio

import httpx
import pytest

from src.localhealth.models.area import Area
from src.localhealth.scrapers.fingertips_client import FingertipsClient, ProviderRequestError


AREA_SEARCH_PAYLOAD = [
    {"Code": "E08000003", "Name": "Manchester City Council", "Short": "Manchester", "AreaTypeId": 402},
    {"Code": "E08000006", "Name": "Salford", "Short": "Salford", "AreaTypeId": 402},
]

LATEST_DATA_PAYLOAD = [
    {
        "IID": 108,
        "Data": [{"Val": 142.7}],
        "Grouping": [{"ComparatorData": {"Val": 121.5}, "Period": "2020 - 22"}],
    },
    {
        "IID": 92488,
        "Period": "2022/23",
        "Data": [{"Val": "75.0"}],
        "Grouping": [{"ComparatorData": {"Val": "60.0"}}],
    },
    {
        "IID": 555,
        "Data": [{"Val": "1.0"}],
        "Grouping": [{"ComparatorData": {"Val": "2.0"}}],
    },
]

METADATA_PAYLOAD = {
    "108": {
        "IID": 108,
        "PolarityId": 2,
        "Descriptive": {
            "Name": "Under 75 mortality rate from all causes (1-74 yrs) (Persons)",
            "Definition": "Age-standardised rate of deaths under 75",
        },
        "Unit": {"Label": "per 100,000"},
    },
    "92488": {
        "IID": 92488,
        "PolarityId": 1,
        "Descriptive": {"Name": "Physically active adults", "Definition": "Adults meeting guidelines"},
        "Unit": {"Label": "%"},
    },
}

STATISTICS_PAYLOAD = {
    "0": {"IID": 108, "Stats": {"Min": 200.4, "Max": 250.9}},
    "1": {"IID": 92488, "Stats": {"Min": 40.0, "Max": 80.0}},
}


def route_payloads(routes, status_overrides=None):
    """
    Build an httpx MockTransport serving JSON payloads by path suffix.

    Args:
        routes: Dictionary of endpoint path -> JSON payload
        status_overrides: Dictionary of endpoint path -> HTTP status

    Returns:
        (transport, requests) where requests collects every request made
    """
    status_overrides = status_overrides or {}
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        for path, payload in routes.items():
            if request.url.path.endswith(path):
                status = status_overrides.get(path, 200)
                return httpx.Response(status, json=payload)
        return httpx.Response(404, json={"error": "not found"})

    return httpx.MockTransport(handler), requests


@pytest.fixture
def fingertips_routes():
    """Default payload for every Fingertips endpoint"""
    return {
        FingertipsClient.AREA_SEARCH: AREA_SEARCH_PAYLOAD,
        FingertipsClient.LATEST_DATA: LATEST_DATA_PAYLOAD,
        FingertipsClient.INDICATOR_METADATA: METADATA_PAYLOAD,
        FingertipsClient.INDICATOR_STATISTICS: STATISTICS_PAYLOAD,
    }


@pytest.fixture
def make_client():
    """Factory for FingertipsClient backed by a MockTransport"""
    def _make(routes, status_overrides=None):
        transport, requests = route_payloads(routes, status_overrides)
        client = FingertipsClient(
            base_url="https://fingertips.test/api",
            client=httpx.AsyncClient(transport=transport),
        )
        return client, requests
    return _make


class FakeAreaProvider:
    """
    In-memory area search provider.

    Records every query; optionally blocks until `release` is set so tests
    can observe in-flight cancellation.
    """

    def __init__(self, areas=None, block=False, fail=False):
        self.areas = areas if areas is not None else [
            Area(code="E08000003", name="Manchester City Council", short_name="Manchester", area_type_id=402),
        ]
        self.block = block
        self.fail = fail
        self.queries = []
        self.cancelled = []
        self.release = asyncio.Event()

    async def search_areas(self, search_text):
        self.queries.append(search_text)
        if self.fail:
            raise ProviderRequestError("/area_search", "boom")
        if self.block:
            try:
                await self.release.wait()
            except asyncio.CancelledError:
                self.cancelled.append(search_text)
                raise
        return [area for area in self.areas]


@pytest.fixture
def area_provider():
    """Factory for FakeAreaProvider"""
    return FakeAreaProvider
