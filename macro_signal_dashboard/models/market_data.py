"""Data models for market data."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterable

import pandas as pd


@dataclass(frozen=True)
class Observation:
    """Single dated observation. ``value`` is None when missing."""

    date: date
    value: float | None


@dataclass
class SeriesMetadata:
    """Metadata for a FRED series."""

    series_id: str
    title: str
    frequency: str
    units: str
    last_updated: datetime


class DataFrequency(str, Enum):
    """Sampling cadence detected from observation gaps."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    UNKNOWN = "unknown"


class FillMethod(str, Enum):
    """How to fill dates a series has no observation for."""

    FORWARD = "forward"  # Last observation carried forward
    LINEAR = "linear"  # Interpolate between bracketing observations
    NONE = "none"  # Exact matches only


@dataclass(frozen=True)
class MergeConfig:
    """Options for a single merge call."""

    fill_method: FillMethod = FillMethod.FORWARD
    inner_join: bool = False


@dataclass(frozen=True)
class SeriesInput:
    """One keyed series handed to the merger."""

    key: str
    data: list[Observation]


@dataclass(frozen=True)
class SeriesInfo:
    """Per-series statistics reported by a merge."""

    key: str
    original_frequency: DataFrequency
    original_count: int
    filled_count: int

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "originalFrequency": self.original_frequency.value,
            "originalCount": self.original_count,
            "filledCount": self.filled_count,
        }


@dataclass(frozen=True)
class DateRange:
    """First and last date of a merged result; both None when empty."""

    start: date | None = None
    end: date | None = None

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat() if self.start else "",
            "end": self.end.isoformat() if self.end else "",
        }


# One merged point: {"date": date, <key>: float | None, ...}
MergedDataPoint = dict


@dataclass
class MergedSeriesResult:
    """Output of merge_multiple_series."""

    data: list[MergedDataPoint] = field(default_factory=list)
    series_info: list[SeriesInfo] = field(default_factory=list)
    date_range: DateRange = field(default_factory=DateRange)

    @property
    def keys(self) -> list[str]:
        return [info.key for info in self.series_info]

    def to_frame(self) -> pd.DataFrame:
        """Merged points as a DataFrame indexed by date, NaN where missing."""
        if not self.data:
            return pd.DataFrame(columns=self.keys)

        df = pd.DataFrame(self.data)
        df["date"] = pd.to_datetime(df["date"])
        df.set_index("date", inplace=True)
        return df.astype(float)

    def to_dict(self) -> dict:
        """JSON-ready representation with ISO dates and explicit nulls."""
        return {
            "data": [
                {k: (v.isoformat() if k == "date" else v) for k, v in point.items()}
                for point in self.data
            ],
            "seriesInfo": [info.to_dict() for info in self.series_info],
            "dateRange": self.date_range.to_dict(),
        }


def parse_fred_observations(raw: Iterable[dict]) -> list[Observation]:
    """
    Normalize raw FRED observations into typed observations.

    FRED marks missing values with "."; those (and anything else that
    is not numeric) are dropped here so no core algorithm ever sees them.

    Args:
        raw: Iterable of {"date": "YYYY-MM-DD", "value": str} dicts

    Returns:
        Observations sorted by date
    """
    df = pd.DataFrame(list(raw), columns=["date", "value"])
    if df.empty:
        return []

    df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d")
    df["value"] = pd.to_numeric(df["value"], errors="coerce")
    df = df.dropna().sort_values("date", kind="stable")

    return [
        Observation(date=ts.date(), value=float(val))
        for ts, val in zip(df["date"], df["value"])
    ]


def observations_from_frame(df: pd.DataFrame) -> list[Observation]:
    """Convert a date-indexed DataFrame with a 'value' column."""
    if df.empty:
        return []
    values = df["value"].dropna()
    return [
        Observation(date=pd.Timestamp(idx).date(), value=float(val))
        for idx, val in values.items()
    ]


def observations_to_frame(observations: Iterable[Observation]) -> pd.DataFrame:
    """Inverse of observations_from_frame."""
    rows = [(pd.Timestamp(o.date), o.value) for o in observations]
    if not rows:
        return pd.DataFrame(columns=["value"])
    df = pd.DataFrame(rows, columns=["date", "value"])
    df.set_index("date", inplace=True)
    return df
