"""Normalization request model and its boundary validator."""

import re
from datetime import date
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, StrictBool, field_validator, model_validator

from macro_signal_dashboard.models.base import CamelModel, validate_model
from macro_signal_dashboard.models.market_data import FillMethod, MergeConfig


MIN_SERIES = 1
MAX_SERIES = 10

KEY_PATTERN = r"^[a-zA-Z][a-zA-Z0-9_]*$"
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _iso_day(value: Any) -> Any:
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ValueError("Date must be YYYY-MM-DD format")
    return value


IsoDay = Annotated[date, BeforeValidator(_iso_day)]


class SeriesSpec(CamelModel):
    """A FRED series and the key it gets in the merged output."""

    series_id: str = Field(alias="seriesId", min_length=1)
    key: str = Field(pattern=KEY_PATTERN)


class NormalizeConfig(CamelModel):
    fill_method: FillMethod = Field(alias="fillMethod")
    inner_join: StrictBool = Field(False, alias="innerJoin")

    @property
    def merge_config(self) -> MergeConfig:
        return MergeConfig(fill_method=self.fill_method, inner_join=self.inner_join)


class DateRangeSpec(CamelModel):
    start: IsoDay
    end: IsoDay

    @model_validator(mode="after")
    def _ordered(self) -> "DateRangeSpec":
        if self.start > self.end:
            raise ValueError("Start date must be before or equal to end date")
        return self


class NormalizeRequest(CamelModel):
    """Validated request to merge several FRED series."""

    series: list[SeriesSpec] = Field(min_length=MIN_SERIES, max_length=MAX_SERIES)
    config: NormalizeConfig
    date_range: DateRangeSpec | None = Field(None, alias="dateRange")

    @field_validator("series")
    @classmethod
    def _unique_keys(cls, value: list[SeriesSpec]) -> list[SeriesSpec]:
        keys = [spec.key for spec in value]
        if len(set(keys)) != len(keys):
            raise ValueError("All series keys must be unique")
        return value

    @property
    def merge_config(self) -> MergeConfig:
        return self.config.merge_config

    @property
    def start(self) -> date | None:
        return self.date_range.start if self.date_range else None

    @property
    def end(self) -> date | None:
        return self.date_range.end if self.date_range else None


def validate_normalize_request(data: Any) -> NormalizeRequest:
    """
    Validate a normalize request.

    Expected shape::

        {
            "series": [{"seriesId": "FEDFUNDS", "key": "fedFunds"}, ...],
            "config": {"fillMethod": "forward", "innerJoin": false},
            "dateRange": {"start": "2020-01-01", "end": "2024-12-31"}   # optional
        }

    Raises:
        ValidationError: listing every problem found
    """
    return validate_model(NormalizeRequest, data, "Invalid request body")
