"""Align a series onto an arbitrary set of target dates.

FRED data comes at various intervals (daily VIX, monthly CPI, quarterly
GDP). These functions produce one value per target date so series of
different frequencies can share a timeline. Missing is always None.
"""

import math
from datetime import date
from typing import Sequence

import numpy as np

from macro_signal_dashboard.models.market_data import FillMethod, Observation
from macro_signal_dashboard.normalization.dates import to_ordinals


def _present(value: float | None) -> float | None:
    """None for missing or non-numeric values."""
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(value) else value


def _sorted(data: Sequence[Observation]) -> list[Observation]:
    return sorted(data, key=lambda o: o.date)


def _floor_indices(source: list[Observation], target_dates: Sequence[date]) -> np.ndarray:
    """Index of the greatest source date <= each target, -1 when none (binary search)."""
    source_ordinals = to_ordinals(o.date for o in source)
    return np.searchsorted(source_ordinals, to_ordinals(target_dates), side="right") - 1


def forward_fill(data: Sequence[Observation], target_dates: Sequence[date]) -> list[Observation]:
    """
    Fill target dates with the last observation carried forward.

    Economic releases are step functions: the unemployment rate published
    on Jan 5th stays the official figure until the next release.

    Args:
        data: Source observations (any order)
        target_dates: Dates to produce values for, sorted ascending

    Returns:
        One observation per target date; value is None before the first source date

    Example:
        monthly = [Observation(date(2024, 1, 1), 3.7), Observation(date(2024, 2, 1), 3.9)]
        forward_fill(monthly, [date(2024, 1, 15), date(2024, 2, 20)])
        # -> values [3.7, 3.9]
    """
    if not data:
        return [Observation(d, None) for d in target_dates]

    ordered = _sorted(data)
    floors = _floor_indices(ordered, target_dates)

    return [
        Observation(target, _present(ordered[i].value) if i >= 0 else None)
        for target, i in zip(target_dates, floors)
    ]


def interpolate_linear(
    data: Sequence[Observation], target_dates: Sequence[date]
) -> list[Observation]:
    """
    Fill target dates by linear interpolation between bracketing observations.

    Exact matches return the source value. Targets before the first or after
    the last source date are None (no extrapolation), as is anything bracketed
    by a missing value.

    Do not use for releases like GDP or CPI: interpolation implies the value
    moved gradually between measurements.
    """
    if not data:
        return [Observation(d, None) for d in target_dates]

    ordered = _sorted(data)
    ordinals = [o.date.toordinal() for o in ordered]
    floors = _floor_indices(ordered, target_dates)
    last = len(ordered) - 1

    result = []
    for target, i in zip(target_dates, floors):
        i = int(i)
        t = target.toordinal()

        if i >= 0 and ordinals[i] == t:
            result.append(Observation(target, _present(ordered[i].value)))
            continue

        # Outside the source span, or only one point to work with
        if i < 0 or i >= last:
            result.append(Observation(target, None))
            continue

        v1 = _present(ordered[i].value)
        v2 = _present(ordered[i + 1].value)
        if v1 is None or v2 is None:
            result.append(Observation(target, None))
            continue

        ratio = (t - ordinals[i]) / (ordinals[i + 1] - ordinals[i])
        result.append(Observation(target, v1 + (v2 - v1) * ratio))

    return result


def align_exact(data: Sequence[Observation], target_dates: Sequence[date]) -> list[Observation]:
    """Exact-match alignment: None wherever the source has no observation."""
    by_date = {o.date: _present(o.value) for o in _sorted(data)}
    return [Observation(d, by_date.get(d)) for d in target_dates]


def align_series(
    data: Sequence[Observation], target_dates: Sequence[date], fill_method: FillMethod
) -> list[Observation]:
    """Dispatch to the aligner for ``fill_method``."""
    if fill_method is FillMethod.FORWARD:
        return forward_fill(data, target_dates)
    if fill_method is FillMethod.LINEAR:
        return interpolate_linear(data, target_dates)
    if fill_method is FillMethod.NONE:
        return align_exact(data, target_dates)
    raise ValueError(f"Unknown fill method: {fill_method}")


def get_latest_aligned_value(data: Sequence[Observation]) -> Observation | None:
    """Most recent observation with a present value, or None."""
    for obs in reversed(_sorted(data)):
        if _present(obs.value) is not None:
            return obs
    return None
