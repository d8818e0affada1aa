"""
Area Data Models

Pydantic models for geographic reporting units returned by area search.
"""
from pydantic import BaseModel, ConfigDict, Field


class Area(BaseModel):
    """
    Geographic reporting unit (e.g., a local authority).

    Attributes:
        code: Provider area code (e.g., "E08000003")
        name: Full area name (e.g., "Manchester City Council")
        short_name: Short area name (e.g., "Manchester")
        area_type_id: Provider area type identifier
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    code: str = Field(..., min_length=1, description="Provider area code")
    name: str = Field(..., description="Full area name")
    short_name: str = Field("", description="Short area name")
    area_type_id: int = Field(..., description="Provider area type identifier")

    def matches_name(self, target_name: str) -> bool:
        """Check for an exact case-insensitive match on the full or short name."""
        target = target_name.strip().casefold()
        return self.name.casefold() == target or self.short_name.casefold() == target
