"""Frequency detection, alignment and multi-series merging."""

from .dates import days_between, generate_date_range
from .frequency import detect_frequency
from .align import (
    align_exact,
    align_series,
    forward_fill,
    get_latest_aligned_value,
    interpolate_linear,
)
from .merge import filter_date_range, merge_multiple_series
from .service import NormalizationService

__all__ = [
    "NormalizationService",
    "align_exact",
    "align_series",
    "days_between",
    "detect_frequency",
    "filter_date_range",
    "forward_fill",
    "generate_date_range",
    "get_latest_aligned_value",
    "interpolate_linear",
    "merge_multiple_series",
]
