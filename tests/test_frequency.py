# tests/test_frequency.py

from datetime import date, timedelta

from macro_signal_dashboard.models.market_data import DataFrequency, Observation
from macro_signal_dashboard.normalization import detect_frequency


def _on(dates):
    return [Observation(d, 1.0) for d in dates]


def test_first_of_month_is_monthly():
    dates = [date(2023, m, 1) for m in range(1, 13)]
    assert detect_frequency(_on(dates)) == DataFrequency.MONTHLY


def test_seven_day_spacing_is_weekly():
    dates = [date(2024, 1, 5) + timedelta(days=7 * i) for i in range(10)]
    assert detect_frequency(_on(dates)) == DataFrequency.WEEKLY


def test_business_days_with_weekends_are_daily():
    start = date(2024, 1, 1)  # Monday
    dates = [start + timedelta(days=i) for i in range(28) if (start + timedelta(days=i)).weekday() < 5]
    assert detect_frequency(_on(dates)) == DataFrequency.DAILY


def test_quarterly_and_yearly():
    quarters = [date(2022, 1, 1), date(2022, 4, 1), date(2022, 7, 1), date(2022, 10, 1), date(2023, 1, 1)]
    years = [date(y, 1, 1) for y in range(2015, 2024)]
    assert detect_frequency(_on(quarters)) == DataFrequency.QUARTERLY
    assert detect_frequency(_on(years)) == DataFrequency.YEARLY


def test_gaps_beyond_yearly_are_unknown():
    dates = [date(2000, 1, 1) + timedelta(days=400 * i) for i in range(5)]
    assert detect_frequency(_on(dates)) == DataFrequency.UNKNOWN


def test_too_few_points_is_unknown():
    assert detect_frequency([]) == DataFrequency.UNKNOWN
    assert detect_frequency(_on([date(2024, 1, 1)])) == DataFrequency.UNKNOWN


def test_unsorted_input_is_sorted_first():
    dates = [date(2023, m, 1) for m in range(1, 13)]
    shuffled = dates[6:] + dates[:6]
    assert detect_frequency(_on(shuffled)) == DataFrequency.MONTHLY


def test_median_ignores_holiday_outliers():
    # Mostly daily with two long gaps
    dates = [date(2024, 1, 1) + timedelta(days=i) for i in range(10)]
    dates += [date(2024, 2, 1), date(2024, 3, 1)]
    assert detect_frequency(_on(dates)) == DataFrequency.DAILY


def test_even_gap_count_uses_upper_median():
    # gaps [1, 40] -> upper median 40 -> quarterly band
    dates = [date(2024, 1, 1), date(2024, 1, 2), date(2024, 2, 11)]
    assert detect_frequency(_on(dates)) == DataFrequency.QUARTERLY


def test_band_edges_are_inclusive():
    five = [date(2024, 1, 1) + timedelta(days=5 * i) for i in range(4)]
    ten = [date(2024, 1, 1) + timedelta(days=10 * i) for i in range(4)]
    assert detect_frequency(_on(five)) == DataFrequency.DAILY
    assert detect_frequency(_on(ten)) == DataFrequency.WEEKLY
