"""
Pydantic Schemas for API Request/Response Models

These schemas define the JSON structure for API endpoints.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.localhealth.models.area import Area
from src.localhealth.models.indicator import NormalizedIndicator


class AreaResponse(BaseModel):
    """Area as returned to the dashboard."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    code: str
    name: str
    short_name: str
    area_type_id: int

    @classmethod
    def from_area(cls, area: Area) -> "AreaResponse":
        return cls(
            code=area.code,
            name=area.name,
            short_name=area.short_name,
            area_type_id=area.area_type_id,
        )


class HealthIndicatorsResponse(BaseModel):
    """Indicators for one area (area is null when an address did not resolve)."""
    area: Optional[AreaResponse] = None
    indicators: List[NormalizedIndicator] = Field(default_factory=list)
    count: int = 0


class HealthCheck(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: datetime
