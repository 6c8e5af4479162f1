"""Calendar helpers shared by the normalization code."""

from datetime import date, timedelta

import numpy as np


def days_between(d1: date, d2: date) -> int:
    """Absolute number of whole days between two dates."""
    return abs((d2 - d1).days)


def generate_date_range(start: date, end: date) -> list[date]:
    """
    Every calendar day from start to end, inclusive.

    Raises:
        ValueError: If start is after end
    """
    if start > end:
        raise ValueError(f"Start date ({start}) must be before or equal to end date ({end})")
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def to_ordinals(dates) -> np.ndarray:
    """Dates as an int64 array of proleptic Gregorian ordinals."""
    return np.fromiter((d.toordinal() for d in dates), dtype=np.int64)
