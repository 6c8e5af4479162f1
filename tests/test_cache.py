# tests/test_cache.py

from datetime import date, datetime

import pytest

from macro_signal_dashboard.data import DataCache
from macro_signal_dashboard.models.market_data import Observation


@pytest.fixture
def cache(tmp_path):
    return DataCache(tmp_path / "fred.db")


FETCHED = datetime(2024, 6, 1, 9, 30)


def test_store_and_read_back(cache):
    stored = cache.store_observations(
        "UNRATE",
        [
            Observation(date(2024, 2, 1), 3.9),
            Observation(date(2024, 1, 1), 3.7),
            Observation(date(2024, 3, 1), None),
        ],
        FETCHED,
    )
    assert stored == 2
    assert cache.get_observations("UNRATE") == [
        Observation(date(2024, 1, 1), 3.7),
        Observation(date(2024, 2, 1), 3.9),
    ]
    assert cache.get_latest_date("UNRATE") == date(2024, 2, 1)
    assert cache.get_observations("UNRATE", start_date=date(2024, 1, 15)) == [
        Observation(date(2024, 2, 1), 3.9)
    ]


def test_unknown_series(cache):
    assert cache.get_latest_date("NOPE") is None
    assert cache.get_last_fetched("NOPE") is None
    assert cache.get_observations("NOPE") == []


def test_revisions_replace_values(cache):
    cache.store_observations("GS10", [Observation(date(2024, 1, 1), 4.0)], FETCHED)
    cache.store_observations("GS10", [Observation(date(2024, 1, 1), 4.1)], FETCHED)
    assert cache.get_observations("GS10") == [Observation(date(2024, 1, 1), 4.1)]


def test_fetch_log_and_status(cache):
    cache.store_observations("GS10", [Observation(date(2024, 1, 1), 4.0)], FETCHED)
    cache.touch("GS10", FETCHED)
    cache.store_metadata("GS10", "10-Year", "Monthly", "Percent", FETCHED)

    assert cache.get_last_fetched("GS10") == FETCHED
    status = cache.get_cache_status()["GS10"]
    assert status["observation_count"] == 1
    assert status["first_date"] == status["last_date"] == "2024-01-01"
    assert status["title"] == "10-Year"
    assert status["last_fetched"] == FETCHED.isoformat()

    metadata = cache.get_metadata("GS10")
    assert metadata.title == "10-Year"
    assert metadata.units == "Percent"
    assert metadata.last_updated == FETCHED
    assert cache.get_metadata("TB3MS") is None


def test_clear(cache):
    for series_id in ("GS10", "TB3MS"):
        cache.store_observations(series_id, [Observation(date(2024, 1, 1), 1.0)], FETCHED)
        cache.touch(series_id, FETCHED)

    cache.clear("GS10")
    assert cache.get_observations("GS10") == []
    assert cache.get_last_fetched("GS10") is None
    assert len(cache.get_observations("TB3MS")) == 1

    cache.clear()
    assert cache.get_cache_status() == {}
