"""Data models."""

from .market_data import (
    DataFrequency,
    DateRange,
    FillMethod,
    MergeConfig,
    MergedSeriesResult,
    Observation,
    SeriesInfo,
    SeriesInput,
    SeriesMetadata,
)
from .signals import Interpretation, SignalResult, SignalsReport, SignalType, get_interpretation
from .alerts import AlertCondition, AlertConfig, AlertTrigger

__all__ = [
    "AlertCondition",
    "AlertConfig",
    "AlertTrigger",
    "DataFrequency",
    "DateRange",
    "FillMethod",
    "Interpretation",
    "MergeConfig",
    "MergedSeriesResult",
    "Observation",
    "SeriesInfo",
    "SeriesInput",
    "SeriesMetadata",
    "SignalResult",
    "SignalsReport",
    "SignalType",
    "get_interpretation",
]
