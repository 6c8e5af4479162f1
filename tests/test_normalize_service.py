# tests/test_normalize_service.py

from datetime import date

import pytest

from macro_signal_dashboard.errors import SeriesFetchError, SeriesNotAllowedError, ValidationError
from macro_signal_dashboard.models.market_data import FillMethod
from macro_signal_dashboard.models.requests import validate_normalize_request
from macro_signal_dashboard.normalization import NormalizationService


def _payload(*series, fill="forward", inner=False, date_range=None):
    payload = {
        "series": [{"seriesId": s, "key": k} for s, k in series],
        "config": {"fillMethod": fill, "innerJoin": inner},
    }
    if date_range:
        payload["dateRange"] = date_range
    return payload


@pytest.fixture
def source(fake_source, make_series):
    return fake_source({
        "VIXCLS": make_series([14.0, 15.0, 16.0, 17.0]),
        "UNRATE": make_series([3.7], start=date(2024, 1, 2)),
    })


class TestValidation:
    def test_defaults(self):
        request = validate_normalize_request(
            {"series": [{"seriesId": "UNRATE", "key": "u"}], "config": {"fillMethod": "linear"}}
        )
        assert request.config.fill_method == FillMethod.LINEAR
        assert request.config.inner_join is False
        assert request.start is None

    @pytest.mark.parametrize(
        "payload, path",
        [
            (_payload(), "series"),
            (_payload(*[("UNRATE", f"k{i}") for i in range(11)]), "series"),
            (_payload(("UNRATE", "a"), ("VIXCLS", "a")), "series"),
            (_payload(("UNRATE", "1bad")), "series.0.key"),
            (_payload(("UNRATE", "has-dash")), "series.0.key"),
            (_payload(("UNRATE", "u"), fill="cubic"), "config.fillMethod"),
            (_payload(("UNRATE", "u"), inner="yes"), "config.innerJoin"),
            (_payload(("UNRATE", "u"), date_range={"start": "2024-02-01", "end": "2024-01-01"}), "dateRange"),
            (_payload(("UNRATE", "u"), date_range={"start": "2024/01/01", "end": "2024-02-01"}), "dateRange.start"),
            (_payload(("UNRATE", "u"), date_range={"start": "2024-01-01", "end": "2024-02-30"}), "dateRange.end"),
            (_payload(("", "u")), "series.0.seriesId"),
            ({"series": [{"seriesId": "UNRATE", "key": "u"}]}, "config"),
        ],
    )
    def test_rejects(self, payload, path):
        with pytest.raises(ValidationError) as exc_info:
            validate_normalize_request(payload)
        assert path in [p for p, _ in exc_info.value.issues]


def test_normalize_merges_requested_series(source):
    result = NormalizationService(source).normalize(
        _payload(("VIXCLS", "vix"), ("UNRATE", "unemployment"))
    )
    assert result.keys == ["vix", "unemployment"]
    assert [p["unemployment"] for p in result.data] == [None, 3.7, 3.7, 3.7]
    assert result.series_info[1].filled_count == 2


def test_normalize_applies_date_range(source):
    result = NormalizationService(source).normalize(
        _payload(("VIXCLS", "vix"), date_range={"start": "2024-01-02", "end": "2024-01-03"})
    )
    assert [p["vix"] for p in result.data] == [15.0, 16.0]
    assert result.date_range.start == date(2024, 1, 2)


def test_unlisted_series_is_rejected_before_fetching(source):
    with pytest.raises(SeriesNotAllowedError, match="'SECRET'"):
        NormalizationService(source).normalize(_payload(("VIXCLS", "vix"), ("SECRET", "s")))
    assert source.requests == []


def test_custom_whitelist(source):
    service = NormalizationService(source, allowed_series={"VIXCLS"})
    with pytest.raises(SeriesNotAllowedError):
        service.normalize(_payload(("UNRATE", "u")))


def test_any_fetch_failure_fails_the_request(fake_source, make_series):
    source = fake_source({"VIXCLS": make_series([14.0])}, failing={"UNRATE"})
    with pytest.raises(SeriesFetchError) as exc_info:
        NormalizationService(source).normalize(_payload(("VIXCLS", "vix"), ("UNRATE", "u")))
    assert exc_info.value.series_id == "UNRATE"
