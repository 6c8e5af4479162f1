"""Detect the sampling cadence of a series."""

from typing import Sequence

import numpy as np

from macro_signal_dashboard.models.market_data import DataFrequency, Observation
from macro_signal_dashboard.normalization.dates import to_ordinals


# Inclusive upper bounds on the median gap, in days.
# Daily allows weekend/holiday gaps (Fri -> Mon = 3 days).
FREQUENCY_BANDS: list[tuple[int, DataFrequency]] = [
    (5, DataFrequency.DAILY),
    (10, DataFrequency.WEEKLY),
    (35, DataFrequency.MONTHLY),
    (95, DataFrequency.QUARTERLY),
    (380, DataFrequency.YEARLY),
]


def detect_frequency(series: Sequence[Observation]) -> DataFrequency:
    """
    Classify a series by the median gap between consecutive observations.

    The median (upper median for an even count) is used instead of the
    mean so a few holiday gaps in daily data do not skew the result.
    """
    if len(series) < 2:
        return DataFrequency.UNKNOWN

    ordinals = np.sort(to_ordinals(o.date for o in series))
    gaps = np.sort(np.diff(ordinals))
    median_gap = int(gaps[len(gaps) // 2])

    for max_gap, frequency in FREQUENCY_BANDS:
        if median_gap <= max_gap:
            return frequency
    return DataFrequency.UNKNOWN
