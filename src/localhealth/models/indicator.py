"""
Indicator Data Models

Pydantic models for raw benchmark payloads and the normalized indicator set.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel


SIGNIFICANCE_BETTER = "Better than England"
SIGNIFICANCE_WORSE = "Worse than England"
SIGNIFICANCE_SIMILAR = "Similar to England"

DEFAULT_PERIOD = "Latest"


class DataPoint(BaseModel):
    """Single reading from the provider (value kept as its string form)."""

    value: Optional[str] = Field(None, description="Reading as returned by the provider")


class RawIndicatorRecord(BaseModel):
    """
    Latest reading of one indicator for one area.

    Attributes:
        iid: Indicator identifier
        period: Reporting period (e.g., "2020 - 22")
        local_data_points: Readings for the area
        comparator_data_points: Readings for the national comparator
    """

    iid: int = Field(..., description="Indicator identifier")
    period: str = Field(DEFAULT_PERIOD, description="Reporting period")
    local_data_points: List[DataPoint] = Field(default_factory=list)
    comparator_data_points: List[DataPoint] = Field(default_factory=list)

    def first_local_value(self) -> Optional[str]:
        """Value of the first local data point, if any."""
        return self.local_data_points[0].value if self.local_data_points else None

    def first_comparator_value(self) -> Optional[str]:
        """Value of the first comparator data point, if any."""
        return self.comparator_data_points[0].value if self.comparator_data_points else None


class IndicatorMetadataEntry(BaseModel):
    """
    Descriptive metadata for one indicator.

    Attributes:
        iid: Indicator identifier
        name: Raw indicator name, may carry parenthetical annotations
        definition: Long-form definition
        unit: Unit label (e.g., "%", "per 1,000")
        polarity_id: 1 higher-is-better, 2 lower-is-better, 3 no direction
    """

    iid: int = Field(..., description="Indicator identifier")
    name: str = Field("", description="Raw indicator name")
    definition: str = Field("", description="Indicator definition")
    unit: str = Field("", description="Unit label")
    polarity_id: Optional[int] = Field(None, description="Polarity identifier")


class IndicatorStatisticsEntry(BaseModel):
    """National spread of one indicator across all areas."""

    iid: int = Field(..., description="Indicator identifier")
    min: Optional[float] = Field(None, description="Lowest value across areas")
    max: Optional[float] = Field(None, description="Highest value across areas")


class IndicatorDataset(BaseModel):
    """
    The three datasets retrieved for one area.

    Statistics arrive unindexed; stats_by_iid is built once on creation so
    normalization never rescans the collection.
    """

    raw: List[RawIndicatorRecord] = Field(default_factory=list)
    metadata: Dict[int, IndicatorMetadataEntry] = Field(default_factory=dict)
    stats: List[IndicatorStatisticsEntry] = Field(default_factory=list)

    _stats_index: Dict[int, IndicatorStatisticsEntry] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        self._stats_index = index_statistics(self.stats)

    @property
    def stats_by_iid(self) -> Dict[int, IndicatorStatisticsEntry]:
        """Statistics keyed by iid (first entry per iid wins)."""
        return self._stats_index


def index_statistics(stats: List[IndicatorStatisticsEntry]) -> Dict[int, IndicatorStatisticsEntry]:
    """
    Build an iid index over a statistics collection.

    The first entry for each iid is kept, matching a first-match scan.

    Args:
        stats: Statistics entries in provider order

    Returns:
        Dictionary of iid -> statistics entry
    """
    index: Dict[int, IndicatorStatisticsEntry] = {}
    for entry in stats:
        index.setdefault(entry.iid, entry)
    return index


class NormalizedIndicator(BaseModel):
    """
    Display-ready indicator comparing an area with England.

    Every field except iid is a display string. Serializes with camelCase
    keys (ageGroup, localValue, ...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    iid: int
    name: str
    age_group: str = ""
    period: str = DEFAULT_PERIOD
    local_value: str
    national_value: str
    unit: str = ""
    polarity_label: str
    significance: str
    worst_value: str
    best_value: str
    range_label: str
    definition: str = ""
