"""
Pipelines Package

Data transformation pipelines:
- Normalization: raw indicator payloads to display-ready comparisons
- Comparison: gauge positions for rendered indicators
"""
from src.localhealth.pipelines.normalization import IndicatorNormalizer, normalize_indicators
from src.localhealth.pipelines.comparison import position

__all__ = ["IndicatorNormalizer", "normalize_indicators", "position"]
