# tests/conftest.py

from datetime import date, datetime, timedelta, timezone

import pytest

from macro_signal_dashboard.config import Settings
from macro_signal_dashboard.models.alerts import AlertCondition, AlertConfig
from macro_signal_dashboard.models.market_data import Observation
from macro_signal_dashboard.models.signals import SignalType


NOW = datetime(2024, 6, 3, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings(tmp_path):
    return Settings(fred_api_key="test-key", cache_dir=tmp_path / "cache")


@pytest.fixture
def make_series():
    """Observations from a list of values, ``step_days`` apart."""
    def _make(values, start=date(2024, 1, 1), step_days=1):
        return [
            Observation(date=start + timedelta(days=i * step_days), value=v)
            for i, v in enumerate(values)
        ]
    return _make


@pytest.fixture
def make_alert():
    def _make(**overrides):
        fields = {
            "id": "8c4a3d52-3f0e-4b8e-9d1c-2b7a6f0e9a11",
            "signal_type": SignalType.COMPOSITE,
            "condition": AlertCondition.CROSSES_ABOVE,
            "threshold": 0.5,
            "created_at": NOW - timedelta(days=1),
            "enabled": True,
            "cooldown_minutes": 5,
        }
        fields.update(overrides)
        return AlertConfig(**fields)
    return _make


class FakeSource:
    """In-memory series source recording every request."""

    def __init__(self, series=None, failing=()):
        self.series = series or {}
        self.failing = set(failing)
        self.requests = []

    def get_series(self, series_id, start_date=None):
        self.requests.append((series_id, start_date))
        if series_id in self.failing:
            raise RuntimeError(f"upstream error for {series_id}")
        data = self.series.get(series_id, [])
        if start_date is None:
            return list(data)
        return [o for o in data if o.date >= start_date]


@pytest.fixture
def fake_source():
    return FakeSource
