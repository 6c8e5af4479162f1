# tests/test_calculator.py

from datetime import date

import pytest

from macro_signal_dashboard.errors import SeriesFetchError
from macro_signal_dashboard.indicators import SignalCalculator, combine
from macro_signal_dashboard.indicators.calculator import lookback_start
from macro_signal_dashboard.models.signals import SignalType


@pytest.fixture
def source(fake_source, make_series):
    monthly = dict(start=date(2023, 7, 1), step_days=30)
    return fake_source({
        "FEDFUNDS": make_series([5.0, 4.9, 4.6, 4.4], **monthly),
        "GS10": make_series([4.0], **monthly),
        "TB3MS": make_series([4.6], **monthly),
        "VIXCLS": make_series([13.0] * 20, start=date(2024, 5, 1)),
        "BAA10Y": make_series([1.9, 1.8, 1.5, 1.2], **monthly),
        "AAA10Y": make_series([0.8], **monthly),
        "CSUSHPISA": make_series([100.0 + i for i in range(13)], start=date(2023, 5, 1), step_days=30),
        "HOUST": make_series([1000.0, 1100.0, 1150.0, 1200.0], **monthly),
    })


def test_lookback_start():
    assert lookback_start(date(2024, 6, 3), 1) == date(2023, 6, 3)
    assert lookback_start(date(2024, 2, 29), 1) == date(2023, 2, 28)


def test_calculate_all(source, now):
    report = SignalCalculator(source).calculate_all(now=now)

    assert list(report.signals) == [
        SignalType.RATE, SignalType.VOLATILITY, SignalType.CREDIT,
        SignalType.HOUSING, SignalType.COMPOSITE,
    ]
    assert report.signals[SignalType.RATE].value == 0.2
    assert report.signals[SignalType.VOLATILITY].value == 0.7
    assert report.signals[SignalType.CREDIT].value == 0.9
    assert report.signals[SignalType.HOUSING].value == 0.46

    expected = combine(
        report.signals[SignalType.RATE],
        report.signals[SignalType.VOLATILITY],
        report.signals[SignalType.CREDIT],
        report.signals[SignalType.HOUSING],
        now=now,
    )
    assert report.signals[SignalType.COMPOSITE] == expected
    assert report.calculated_at == now

    body = report.to_dict()
    assert set(body["signals"]) == {"rate", "volatility", "credit", "housing", "composite"}
    assert body["meta"]["version"] == "1.0.0"


def test_each_series_fetched_once_with_its_lookback(source, now):
    SignalCalculator(source).calculate_all(now=now)
    starts = dict(source.requests)
    assert len(source.requests) == 8
    assert starts["CSUSHPISA"] == date(2022, 6, 3)
    assert starts["HOUST"] == date(2022, 6, 3)
    assert starts["FEDFUNDS"] == date(2023, 6, 3)
    assert starts["VIXCLS"] == date(2023, 6, 3)


def test_single_signal_fetches_only_its_inputs(source, now):
    result = SignalCalculator(source).calculate_volatility(now=now)
    assert result.value == 0.7
    assert [series_id for series_id, _ in source.requests] == ["VIXCLS"]


def test_get_signal_by_name(source, now):
    calculator = SignalCalculator(source)
    assert calculator.get_signal("CREDIT", now=now).value == 0.9
    assert calculator.get_signal("composite", now=now).name == "Composite Signal"
    assert calculator.get_signal("bonds", now=now) is None


def test_snapshot_values(source):
    values = SignalCalculator(source).snapshot()
    assert set(values) == {"rate", "volatility", "credit", "housing", "composite"}


def test_fetch_failure_is_not_masked(fake_source, now):
    calculator = SignalCalculator(fake_source(failing={"VIXCLS"}))
    with pytest.raises(SeriesFetchError) as exc_info:
        calculator.calculate_all(now=now)
    assert exc_info.value.series_id == "VIXCLS"
