"""Fetch signal inputs and compute the trading signals."""

import logging
from datetime import date, datetime

import pandas as pd

from macro_signal_dashboard import __version__
from macro_signal_dashboard.data.source import SeriesSource, fetch_concurrently
from macro_signal_dashboard.indicators.composite import combine
from macro_signal_dashboard.indicators.signals import (
    calculate_credit_signal,
    calculate_housing_signal,
    calculate_rate_signal,
    calculate_volatility_signal,
)
from macro_signal_dashboard.models.market_data import Observation
from macro_signal_dashboard.models.signals import SignalResult, SignalsReport, SignalType
from macro_signal_dashboard.models.timestamps import utc_now


logger = logging.getLogger(__name__)


# FRED inputs of each signal, in calculator argument order
SIGNAL_INPUTS: dict[SignalType, tuple[str, ...]] = {
    SignalType.RATE: ("FEDFUNDS", "GS10", "TB3MS"),
    SignalType.VOLATILITY: ("VIXCLS",),
    SignalType.CREDIT: ("BAA10Y", "AAA10Y"),
    SignalType.HOUSING: ("CSUSHPISA", "HOUST"),
}

# Housing needs two years for the year-over-year comparison
LOOKBACK_YEARS: dict[SignalType, int] = {
    SignalType.RATE: 1,
    SignalType.VOLATILITY: 1,
    SignalType.CREDIT: 1,
    SignalType.HOUSING: 2,
}

CALCULATORS = {
    SignalType.RATE: calculate_rate_signal,
    SignalType.VOLATILITY: calculate_volatility_signal,
    SignalType.CREDIT: calculate_credit_signal,
    SignalType.HOUSING: calculate_housing_signal,
}


def lookback_start(today: date, years: int) -> date:
    """Same calendar day ``years`` back (Feb 29 falls back to Feb 28)."""
    return (pd.Timestamp(today) - pd.DateOffset(years=years)).date()


class SignalCalculator:
    """Computes the four trading signals plus the composite."""

    def __init__(self, source: SeriesSource, max_workers: int = 8) -> None:
        self.source = source
        self.max_workers = max_workers

    def _fetch_inputs(
        self, signal_types: list[SignalType], today: date
    ) -> dict[SignalType, list[list[Observation]]]:
        """
        Fetch the inputs of several signals concurrently.

        Raises:
            SeriesFetchError: if any input fails; no partial results are used
        """
        by_lookback: dict[int, list[str]] = {}
        for signal_type in signal_types:
            by_lookback.setdefault(LOOKBACK_YEARS[signal_type], []).extend(
                SIGNAL_INPUTS[signal_type]
            )

        fetched: dict[tuple[int, str], list[Observation]] = {}
        for years, series_ids in by_lookback.items():
            results = fetch_concurrently(
                self.source,
                series_ids,
                lookback_start(today, years),
                max_workers=self.max_workers,
            )
            for series_id, observations in results.items():
                fetched[(years, series_id)] = observations

        return {
            signal_type: [
                fetched[(LOOKBACK_YEARS[signal_type], series_id)]
                for series_id in SIGNAL_INPUTS[signal_type]
            ]
            for signal_type in signal_types
        }

    def calculate(self, signal_type: SignalType, now: datetime | None = None) -> SignalResult:
        """Compute one of the four base signals."""
        if signal_type is SignalType.COMPOSITE:
            return self.calculate_all(now).signals[SignalType.COMPOSITE]

        now = now or utc_now()
        inputs = self._fetch_inputs([signal_type], now.date())
        return CALCULATORS[signal_type](*inputs[signal_type], now=now)

    def calculate_rate(self, now: datetime | None = None) -> SignalResult:
        return self.calculate(SignalType.RATE, now)

    def calculate_volatility(self, now: datetime | None = None) -> SignalResult:
        return self.calculate(SignalType.VOLATILITY, now)

    def calculate_credit(self, now: datetime | None = None) -> SignalResult:
        return self.calculate(SignalType.CREDIT, now)

    def calculate_housing(self, now: datetime | None = None) -> SignalResult:
        return self.calculate(SignalType.HOUSING, now)

    def calculate_all(self, now: datetime | None = None) -> SignalsReport:
        """All four signals and their composite from a single concurrent fetch."""
        now = now or utc_now()
        base_types = list(CALCULATORS)
        inputs = self._fetch_inputs(base_types, now.date())

        signals = {
            signal_type: CALCULATORS[signal_type](*inputs[signal_type], now=now)
            for signal_type in base_types
        }
        signals[SignalType.COMPOSITE] = combine(
            signals[SignalType.RATE],
            signals[SignalType.VOLATILITY],
            signals[SignalType.CREDIT],
            signals[SignalType.HOUSING],
            now=now,
        )

        logger.info(
            "Signals: "
            + ", ".join(f"{t.value}={r.value:+.2f}" for t, r in signals.items())
        )
        return SignalsReport(signals=signals, calculated_at=now, version=__version__)

    def get_signal(self, signal_type: str, now: datetime | None = None) -> SignalResult | None:
        """Signal by type name (case-insensitive); None for unknown types."""
        try:
            parsed = SignalType(signal_type.lower())
        except ValueError:
            return None
        return self.calculate(parsed, now)

    def snapshot(self) -> dict[str, float]:
        """Signal type -> current value, for the alert evaluator."""
        return self.calculate_all().values()
