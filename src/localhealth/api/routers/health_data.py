"""
Health Data Router

Endpoints for area search and local health indicators.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from src.localhealth.api.dependencies import get_indicator_service
from src.localhealth.api.schemas import AreaResponse, HealthIndicatorsResponse
from src.localhealth.services.health_indicators import HealthIndicatorService

router = APIRouter(prefix="/api/v1/health-data", tags=["health-data"])


def _raise_on_notifications(service: HealthIndicatorService) -> None:
    """Turn a notified provider failure into a 502 response."""
    messages = getattr(service.notify, "messages", [])
    if messages:
        raise HTTPException(status_code=502, detail=messages[0])


def _build_response(area, indicators) -> HealthIndicatorsResponse:
    return HealthIndicatorsResponse(
        area=AreaResponse.from_area(area) if area is not None else None,
        indicators=indicators,
        count=len(indicators),
    )


@router.get("/areas", response_model=List[AreaResponse])
async def search_areas(
    search_text: str = Query(..., description="Area name or code"),
    service: HealthIndicatorService = Depends(get_indicator_service),
):
    """
    Search reporting areas by name.

    Args:
        search_text: Area name or code (3+ characters to trigger a lookup)
        service: Indicator service

    Returns:
        Matching areas

    Raises:
        HTTPException: 502 if the provider request fails
    """
    areas = await service.search_areas(search_text)
    _raise_on_notifications(service)
    return [AreaResponse.from_area(area) for area in areas]


@router.get("/areas/{area_code}/indicators", response_model=HealthIndicatorsResponse)
async def get_area_indicators(
    area_code: str,
    service: HealthIndicatorService = Depends(get_indicator_service),
):
    """
    Get normalized health indicators for an area code.

    Args:
        area_code: Provider area code
        service: Indicator service

    Returns:
        Area and its indicators

    Raises:
        HTTPException: 404 if the area is unknown, 502 if a provider request fails
    """
    area = await service.find_area_by_code(area_code)
    _raise_on_notifications(service)
    if area is None:
        raise HTTPException(status_code=404, detail=f"Area not found: {area_code}")

    indicators = await service.fetch_indicators_for_area(area)
    _raise_on_notifications(service)

    return _build_response(area, indicators)


@router.get("/indicators", response_model=HealthIndicatorsResponse)
async def get_address_indicators(
    address: str = Query(..., min_length=1, description="Property address"),
    service: HealthIndicatorService = Depends(get_indicator_service),
):
    """
    Resolve a property address to an area and get its health indicators.

    Args:
        address: Property address (e.g., "8 Birch Road, Manchester, M1 3LP")
        service: Indicator service

    Returns:
        Area and indicators; area is null when the address cannot be resolved

    Raises:
        HTTPException: 502 if a provider request fails
    """
    area = await service.resolve_area(address)
    _raise_on_notifications(service)
    if area is None:
        return _build_response(None, [])

    indicators = await service.fetch_indicators_for_area(area)
    _raise_on_notifications(service)

    return _build_response(area, indicators)
