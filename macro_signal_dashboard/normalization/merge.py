"""Merge several series of differing frequency onto one date axis."""

from datetime import date
from typing import Sequence

from macro_signal_dashboard.models.market_data import (
    DateRange,
    MergeConfig,
    MergedDataPoint,
    MergedSeriesResult,
    SeriesInfo,
    SeriesInput,
)
from macro_signal_dashboard.normalization.align import align_series
from macro_signal_dashboard.normalization.frequency import detect_frequency


def merge_multiple_series(
    series: Sequence[SeriesInput], config: MergeConfig | None = None
) -> MergedSeriesResult:
    """
    Merge keyed series onto their common (union or intersection) date axis.

    Points are matched by date, never by position: zipping a daily and a
    monthly array index-by-index would silently misalign them.

    Series keys are assumed unique (checked by the request validator).

    Args:
        series: Keyed observation lists
        config: Fill method and join mode

    Returns:
        One point per date with every key present (None where missing),
        per-series fill statistics and the covered date range

    Example:
        merge_multiple_series(
            [SeriesInput("vix", daily_vix), SeriesInput("unemployment", monthly_unrate)],
            MergeConfig(fill_method=FillMethod.FORWARD),
        )
    """
    config = config or MergeConfig()

    if not series or all(not s.data for s in series):
        return MergedSeriesResult()

    original_dates = [{o.date for o in s.data} for s in series]

    all_dates: list[date] = sorted(set().union(*original_dates))
    if config.inner_join:
        all_dates = [d for d in all_dates if all(d in dates for dates in original_dates)]

    if not all_dates:
        return MergedSeriesResult(
            series_info=[
                SeriesInfo(
                    key=s.key,
                    original_frequency=detect_frequency(s.data),
                    original_count=len(s.data),
                    filled_count=0,
                )
                for s in series
            ]
        )

    aligned: dict[str, list] = {}
    series_info = []

    for s, originals in zip(series, original_dates):
        values = [o.value for o in align_series(s.data, all_dates, config.fill_method)]
        aligned[s.key] = values

        filled_count = sum(
            1 for d, v in zip(all_dates, values) if v is not None and d not in originals
        )
        series_info.append(
            SeriesInfo(
                key=s.key,
                original_frequency=detect_frequency(s.data),
                original_count=len(s.data),
                filled_count=filled_count,
            )
        )

    data: list[MergedDataPoint] = []
    for i, d in enumerate(all_dates):
        point: MergedDataPoint = {"date": d}
        for s in series:
            point[s.key] = aligned[s.key][i]
        data.append(point)

    return MergedSeriesResult(
        data=data,
        series_info=series_info,
        date_range=DateRange(start=all_dates[0], end=all_dates[-1]),
    )


def filter_date_range(result: MergedSeriesResult, start: date, end: date) -> MergedSeriesResult:
    """
    Restrict a merged result to start <= date <= end.

    The reported range is the first/last kept date, falling back to the
    requested bounds when no point survives.
    """
    kept = [point for point in result.data if start <= point["date"] <= end]
    return MergedSeriesResult(
        data=kept,
        series_info=list(result.series_info),
        date_range=DateRange(
            start=kept[0]["date"] if kept else start,
            end=kept[-1]["date"] if kept else end,
        ),
    )
