"""
Search Module

Debounced, cancellable area search and best-match selection.
"""
from src.localhealth.search.area_search import (
    AreaSearchClient,
    CancellationToken,
    select_best_area,
)

__all__ = ["AreaSearchClient", "CancellationToken", "select_best_area"]
