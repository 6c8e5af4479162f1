# tests/test_fred_fetcher.py

from datetime import date, datetime, timedelta

import httpx
import pytest

from macro_signal_dashboard.config import Settings
from macro_signal_dashboard.data import FredFetcher
from macro_signal_dashboard.errors import SeriesFetchError


class FakeFred:
    """MockTransport handler serving canned FRED responses."""

    def __init__(self, observations=None, status_code=200, metadata_status=200):
        self.observations = observations or {}
        self.status_code = status_code
        self.metadata_status = metadata_status
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        series_id = request.url.params["series_id"]

        if request.url.path.endswith("/series/observations"):
            if self.status_code != 200:
                return httpx.Response(self.status_code, json={"error_message": "boom"})
            rows = self.observations.get(series_id, [])
            start = request.url.params.get("observation_start")
            if start:
                rows = [r for r in rows if r["date"] >= start]
            return httpx.Response(200, json={"observations": rows})

        if self.metadata_status != 200:
            return httpx.Response(self.metadata_status)
        return httpx.Response(200, json={"seriess": [{
            "id": series_id,
            "title": f"{series_id} title",
            "frequency": "Monthly",
            "units": "Percent",
            "last_updated": "2024-05-01 07:51:02-05",
        }]})

    def observation_calls(self):
        return [r for r in self.requests if r.url.path.endswith("/series/observations")]


def _rows(*pairs):
    return [{"date": d, "value": v} for d, v in pairs]


@pytest.fixture
def fred():
    return FakeFred({
        "FEDFUNDS": _rows(("2024-01-01", "5.33"), ("2024-02-01", "."), ("2024-03-01", "5.31")),
        "GS10": _rows(("2024-01-01", "4.06")),
    })


@pytest.fixture
def fetcher(settings, fred):
    client = httpx.Client(transport=httpx.MockTransport(fred))
    with FredFetcher(settings, client=client) as f:
        yield f


def test_requires_api_key(tmp_path):
    with pytest.raises(ValueError, match="FRED_API_KEY"):
        FredFetcher(Settings(fred_api_key="", cache_dir=tmp_path))


def test_missing_markers_are_dropped(fetcher):
    observations = fetcher.fetch_series("FEDFUNDS")
    assert [(o.date, o.value) for o in observations] == [
        (date(2024, 1, 1), 5.33),
        (date(2024, 3, 1), 5.31),
    ]


def test_request_carries_key_and_format(fetcher, fred):
    fetcher.fetch_series("GS10")
    params = fred.observation_calls()[0].url.params
    assert params["api_key"] == "test-key"
    assert params["file_type"] == "json"
    assert "observation_start" not in params


def test_delta_update_starts_after_latest_cached_date(fetcher, fred):
    fetcher.fetch_series("FEDFUNDS")
    fred.observations["FEDFUNDS"].append({"date": "2024-04-01", "value": "5.30"})

    observations = fetcher.fetch_series("FEDFUNDS")

    assert fred.observation_calls()[-1].url.params["observation_start"] == "2024-03-02"
    assert [o.value for o in observations] == [5.33, 5.31, 5.30]


def test_force_full_ignores_cache(fetcher, fred):
    fetcher.fetch_series("FEDFUNDS")
    fetcher.fetch_series("FEDFUNDS", force_full=True)
    assert "observation_start" not in fred.observation_calls()[-1].url.params


def test_metadata_is_cached(fetcher):
    fetcher.fetch_series("GS10")
    status = fetcher.get_status()
    assert status["GS10"]["title"] == "GS10 title"
    assert status["GS10"]["observation_count"] == 1
    # Signal series never fetched are still listed
    assert status["VIXCLS"]["observation_count"] == 0


def test_metadata_failure_is_not_fatal(settings):
    fred = FakeFred({"GS10": _rows(("2024-01-01", "4.06"))}, metadata_status=500)
    client = httpx.Client(transport=httpx.MockTransport(fred))
    with FredFetcher(settings, client=client) as fetcher:
        assert [o.value for o in fetcher.fetch_series("GS10")] == [4.06]


def test_http_errors_propagate(settings):
    client = httpx.Client(transport=httpx.MockTransport(FakeFred(status_code=500)))
    with FredFetcher(settings, client=client) as fetcher:
        with pytest.raises(httpx.HTTPStatusError):
            fetcher.fetch_series("GS10")


def test_get_series_serves_fresh_cache(fetcher, fred):
    first = fetcher.get_series("FEDFUNDS")
    second = fetcher.get_series("FEDFUNDS", start_date=date(2024, 2, 1))
    assert len(fred.observation_calls()) == 1
    assert len(first) == 2
    assert [o.date for o in second] == [date(2024, 3, 1)]


def test_freshness_follows_ttl(fetcher):
    assert not fetcher.is_fresh("GS10")
    fetcher.fetch_series("GS10")
    assert fetcher.is_fresh("GS10")
    assert not fetcher.is_fresh("GS10", now=datetime.now() + timedelta(hours=25))


def test_fetch_many(fetcher):
    result = fetcher.fetch_many(["FEDFUNDS", "GS10", "FEDFUNDS"])
    assert list(result) == ["FEDFUNDS", "GS10"]
    assert [o.value for o in result["GS10"]] == [4.06]


def test_fetch_many_fails_as_a_whole(settings):
    client = httpx.Client(transport=httpx.MockTransport(FakeFred(status_code=503)))
    with FredFetcher(settings, client=client) as fetcher:
        with pytest.raises(SeriesFetchError) as exc_info:
            fetcher.fetch_many(["GS10", "TB3MS"])
    assert exc_info.value.series_id == "GS10"
    assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)
