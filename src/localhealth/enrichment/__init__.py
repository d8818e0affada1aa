"""
Enrichment Module

Concurrent retrieval of the indicator datasets for an area.
"""
from src.localhealth.enrichment.aggregator import AggregationError, IndicatorDataAggregator

__all__ = ["AggregationError", "IndicatorDataAggregator"]
