"""
Indicator Normalization Pipeline

Joins raw readings, metadata and national statistics into display-ready,
polarity-aware indicator comparisons against England.
"""
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from src.localhealth.utils.logger import get_logger
from src.localhealth.utils.formatting import NOT_AVAILABLE, format_range, format_value, parse_float
from src.localhealth.models.indicator import (
    DEFAULT_PERIOD,
    SIGNIFICANCE_BETTER,
    SIGNIFICANCE_SIMILAR,
    SIGNIFICANCE_WORSE,
    IndicatorDataset,
    IndicatorMetadataEntry,
    IndicatorStatisticsEntry,
    NormalizedIndicator,
    RawIndicatorRecord,
    index_statistics,
)
from src.localhealth.transformers.indicator_text import clean_name, extract_age_group

logger = get_logger(__name__)

POLARITY_HIGHER_IS_BETTER = 1
POLARITY_LOWER_IS_BETTER = 2
POLARITY_NO_DIRECTION = 3

DEFAULT_POLARITY = POLARITY_HIGHER_IS_BETTER


@dataclass(frozen=True)
class PolarityDirections:
    """
    Which statistics bound is the worst and which is the best.

    Attributes:
        worst: "min" or "max"
        best: "min" or "max"
    """
    worst: str
    best: str


POLARITY_DIRECTIONS: Dict[int, PolarityDirections] = {
    POLARITY_HIGHER_IS_BETTER: PolarityDirections(worst="min", best="max"),
    POLARITY_LOWER_IS_BETTER: PolarityDirections(worst="max", best="min"),
    POLARITY_NO_DIRECTION: PolarityDirections(worst="min", best="max"),
}

POLARITY_LABELS: Dict[int, str] = {
    POLARITY_HIGHER_IS_BETTER: "Higher values are better",
    POLARITY_LOWER_IS_BETTER: "Lower values are better",
    POLARITY_NO_DIRECTION: "No clear better/worse",
}


def resolve_polarity(polarity_id: Optional[int]) -> int:
    """Map a metadata polarity id to a known polarity (default: higher is better)."""
    if polarity_id in POLARITY_DIRECTIONS:
        return polarity_id
    return DEFAULT_POLARITY


def favors_higher_values(polarity: int) -> bool:
    """True when a higher local value counts as better (polarities 1 and 3)."""
    return POLARITY_DIRECTIONS[polarity].best == "max"


def calculate_significance(
    local_value: Optional[float],
    national_value: Optional[float],
    polarity: int
) -> str:
    """
    Classify a local value against the national value.

    Args:
        local_value: Area value
        national_value: England value
        polarity: Resolved polarity id

    Returns:
        "Better than England", "Worse than England" or "Similar to England"
    """
    if local_value is None or national_value is None:
        return SIGNIFICANCE_SIMILAR

    higher_is_better = favors_higher_values(polarity)
    if local_value > national_value:
        return SIGNIFICANCE_BETTER if higher_is_better else SIGNIFICANCE_WORSE
    if local_value < national_value:
        return SIGNIFICANCE_WORSE if higher_is_better else SIGNIFICANCE_BETTER
    return SIGNIFICANCE_SIMILAR


def bound_values(
    stats: Optional[IndicatorStatisticsEntry],
    polarity: int
) -> Tuple[Optional[float], Optional[float]]:
    """
    Pick the worst and best values from an indicator's statistics.

    Returns:
        (worst, best), both None when statistics are missing
    """
    if stats is None:
        return None, None
    directions = POLARITY_DIRECTIONS[polarity]
    return getattr(stats, directions.worst), getattr(stats, directions.best)


def deduplicate_indicators(indicators: List[NormalizedIndicator]) -> List[NormalizedIndicator]:
    """
    Keep the first indicator for each iid, preserving order.

    Args:
        indicators: Normalized indicators in emission order

    Returns:
        Indicators with unique iids
    """
    seen = set()
    unique = []
    for indicator in indicators:
        if indicator.iid in seen:
            continue
        seen.add(indicator.iid)
        unique.append(indicator)
    return unique


class IndicatorNormalizer:
    """
    Turns the three provider datasets into NormalizedIndicator records.

    Records without metadata are dropped; every other missing value has a
    display fallback ("N/A", default polarity) so normalization never raises.
    """

    def normalize(
        self,
        raw: List[RawIndicatorRecord],
        metadata: Mapping[int, IndicatorMetadataEntry],
        stats_by_iid: Mapping[int, IndicatorStatisticsEntry]
    ) -> List[NormalizedIndicator]:
        """
        Normalize raw records in input order, then deduplicate by iid.

        Args:
            raw: Raw indicator records
            metadata: Dictionary of iid -> metadata entry
            stats_by_iid: Dictionary of iid -> statistics entry

        Returns:
            Ordered, deduplicated normalized indicators
        """
        indicators = []
        dropped = 0

        for record in raw:
            meta = metadata.get(record.iid)
            if meta is None:
                dropped += 1
                logger.debug("indicator_missing_metadata", iid=record.iid)
                continue

            indicators.append(
                self.normalize_record(record, meta, stats_by_iid.get(record.iid))
            )

        unique = deduplicate_indicators(indicators)

        logger.info(
            "indicators_normalized",
            raw_records=len(raw),
            dropped_without_metadata=dropped,
            duplicates_removed=len(indicators) - len(unique),
            indicators=len(unique)
        )

        return unique

    def normalize_dataset(self, dataset: IndicatorDataset) -> List[NormalizedIndicator]:
        """Normalize an aggregated dataset using its prebuilt statistics index."""
        return self.normalize(dataset.raw, dataset.metadata, dataset.stats_by_iid)

    def normalize_record(
        self,
        record: RawIndicatorRecord,
        meta: IndicatorMetadataEntry,
        stats: Optional[IndicatorStatisticsEntry]
    ) -> NormalizedIndicator:
        """
        Build one NormalizedIndicator.

        Args:
            record: Raw reading
            meta: Metadata for the record's iid
            stats: National statistics for the record's iid, if any

        Returns:
            Display-ready indicator
        """
        polarity = resolve_polarity(meta.polarity_id)
        unit = meta.unit

        local_value = parse_float(record.first_local_value())
        national_value = parse_float(record.first_comparator_value())
        worst_value, best_value = bound_values(stats, polarity)

        range_label = (
            format_range(stats.min, stats.max, unit) if stats is not None else NOT_AVAILABLE
        )

        return NormalizedIndicator(
            iid=record.iid,
            name=clean_name(meta.name),
            age_group=extract_age_group(meta.name),
            period=record.period or DEFAULT_PERIOD,
            local_value=format_value(local_value, unit),
            national_value=format_value(national_value, unit),
            unit=unit,
            polarity_label=POLARITY_LABELS[polarity],
            significance=calculate_significance(local_value, national_value, polarity),
            worst_value=format_value(worst_value, unit),
            best_value=format_value(best_value, unit),
            range_label=range_label,
            definition=meta.definition,
        )


def normalize_indicators(
    raw: List[RawIndicatorRecord],
    metadata: Mapping[int, IndicatorMetadataEntry],
    stats: List[IndicatorStatisticsEntry]
) -> List[NormalizedIndicator]:
    """
    Normalize indicators from an unindexed statistics collection.

    The statistics index is built once here rather than scanned per record.
    """
    return IndicatorNormalizer().normalize(raw, metadata, index_statistics(stats))
