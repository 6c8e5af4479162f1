"""Turn raw FRED series into bounded trading signals.

Every signal lies in [-1, 1] (strong bearish to strong bullish). Each
calculator reads one or two features from the latest and historical
observations, maps each feature onto a contribution through fixed bands,
combines the contributions with fixed weights and clamps the result.

Lookbacks are positional: "3 periods ago" is the observation three
positions before the latest, whatever the series frequency. A feature
whose lookback is not available is None, never zero.

The band thresholds are hand-tuned and must stay exactly as written;
existing signal outputs depend on them.
"""

from datetime import datetime
from typing import Sequence

import numpy as np

from macro_signal_dashboard.models.market_data import Observation
from macro_signal_dashboard.models.signals import (
    SignalResult,
    clamp,
    get_interpretation,
    round_half_up,
)
from macro_signal_dashboard.models.timestamps import utc_now


# Feature weights within each signal
RATE_CHANGE_WEIGHT = 0.6
YIELD_CURVE_WEIGHT = 0.4
HOME_PRICE_WEIGHT = 0.6
HOUSING_STARTS_WEIGHT = 0.4

CHANGE_PERIODS = 3  # Lookback for rate, spread and starts momentum
YOY_PERIODS = 12  # Monthly home price index -> year over year
VIX_MA_PERIODS = 20

# Confidence when the primary input is present / missing
RATE_CONFIDENCE = (0.85, 0.5)
VOLATILITY_CONFIDENCE = (0.8, 0.3)
CREDIT_CONFIDENCE = (0.75, 0.3)
HOUSING_CONFIDENCE = (0.7, 0.3)


# =============================================================================
# Series helpers
# =============================================================================

def _ordered(data: Sequence[Observation] | None) -> list[Observation]:
    """Observations with a value, oldest first."""
    if not data:
        return []
    return sorted((o for o in data if o.value is not None), key=lambda o: o.date)


def latest_value(data: Sequence[Observation] | None) -> float | None:
    """Value of the most recent observation."""
    ordered = _ordered(data)
    return ordered[-1].value if ordered else None


def value_n_periods_ago(data: Sequence[Observation] | None, periods: int) -> float | None:
    """Value ``periods`` observations before the latest, None if history is too short."""
    ordered = _ordered(data)
    if len(ordered) < periods + 1:
        return None
    return ordered[-1 - periods].value


def simple_moving_average(data: Sequence[Observation] | None, periods: int) -> float | None:
    """Mean of the last ``periods`` values, None if history is too short."""
    ordered = _ordered(data)
    if len(ordered) < periods:
        return None
    return float(np.mean([o.value for o in ordered[-periods:]]))


def _round2(value: float | None) -> float | None:
    return None if value is None else round_half_up(value)


def _pct_change(current: float | None, previous: float | None) -> float | None:
    if current is None or previous is None or previous == 0:
        return None
    return (current - previous) / previous * 100


def _result(
    name: str,
    value: float,
    confidence: float,
    explanation: str,
    indicators: dict[str, float | None],
    now: datetime | None,
) -> SignalResult:
    # Interpretation follows the published (rounded) value so the alert
    # evaluator's any_change buckets agree with what the signal reports.
    published = round_half_up(clamp(value))
    return SignalResult(
        name=name,
        value=published,
        interpretation=get_interpretation(published),
        confidence=confidence,
        explanation=explanation.strip() or f"Insufficient data for {name.lower()} calculation.",
        indicators=indicators,
        updated_at=now or utc_now(),
    )


# =============================================================================
# Interest rates
# =============================================================================

def calculate_rate_signal(
    fed_funds: Sequence[Observation],
    ten_year: Sequence[Observation],
    three_month: Sequence[Observation],
    now: datetime | None = None,
) -> SignalResult:
    """
    Interest rate signal from policy-rate trajectory and yield-curve slope.

    Fed cutting = bullish, hiking = bearish; an inverted curve (10Y below 3M)
    is bearish, a steep curve mildly bullish. Weighted 60/40.

    FRED series: FEDFUNDS, GS10, TB3MS
    """
    fed_funds_current = latest_value(fed_funds)
    fed_funds_before = value_n_periods_ago(fed_funds, CHANGE_PERIODS)
    ten_year_yield = latest_value(ten_year)
    three_month_yield = latest_value(three_month)

    fed_funds_change = None
    if fed_funds_current is not None and fed_funds_before is not None:
        fed_funds_change = fed_funds_current - fed_funds_before

    curve_slope = None
    if ten_year_yield is not None and three_month_yield is not None:
        curve_slope = ten_year_yield - three_month_yield

    rate_change_signal = 0.0
    if fed_funds_change is not None:
        if fed_funds_change <= -0.5:
            rate_change_signal = 1.0
        elif fed_funds_change <= -0.25:
            rate_change_signal = 0.5
        elif fed_funds_change >= 0.5:
            rate_change_signal = -1.0
        elif fed_funds_change >= 0.25:
            rate_change_signal = -0.5

    curve_signal = 0.0
    if curve_slope is not None:
        if curve_slope < -0.5:
            curve_signal = -1.0
        elif curve_slope < 0:
            curve_signal = -0.5
        elif curve_slope > 1.5:
            curve_signal = 0.5
        elif curve_slope > 0.5:
            curve_signal = 0.25

    value = rate_change_signal * RATE_CHANGE_WEIGHT + curve_signal * YIELD_CURVE_WEIGHT

    explanation = ""
    if fed_funds_change is not None:
        if fed_funds_change < 0:
            explanation = (
                f"Fed Funds rate decreased {abs(fed_funds_change):.2f}% over 3 periods, "
                "indicating easing monetary policy."
            )
        elif fed_funds_change > 0:
            explanation = (
                f"Fed Funds rate increased {fed_funds_change:.2f}% over 3 periods, "
                "indicating tightening monetary policy."
            )
        else:
            explanation = "Fed Funds rate unchanged over 3 periods."
    if curve_slope is not None and curve_slope < 0:
        explanation += (
            f" Yield curve is inverted ({curve_slope:.2f}%), a potential recession indicator."
        )

    both_available = fed_funds_change is not None and curve_slope is not None
    confidence = RATE_CONFIDENCE[0] if both_available else RATE_CONFIDENCE[1]

    return _result(
        "Interest Rate Signal",
        value,
        confidence,
        explanation,
        {
            "fedFundsRate": fed_funds_current,
            "fedFundsChange3m": _round2(fed_funds_change),
            "tenYearYield": ten_year_yield,
            "threeMonthYield": three_month_yield,
            "yieldCurveSlope": _round2(curve_slope),
        },
        now,
    )


# =============================================================================
# Volatility
# =============================================================================

def calculate_volatility_signal(
    vix: Sequence[Observation], now: datetime | None = None
) -> SignalResult:
    """
    Volatility signal from the VIX level, adjusted for its trend.

    Level bands: >35 extreme fear, >25 elevated, >20 above average,
    <12 very low (bullish but complacent), <15 low, otherwise normal.
    A VIX more than 20% above its 20-period average subtracts 0.2;
    more than 20% below adds 0.2.

    FRED series: VIXCLS
    """
    vix_current = latest_value(vix)
    vix_average = simple_moving_average(vix, VIX_MA_PERIODS)

    value = 0.0
    explanation = ""

    if vix_current is not None:
        if vix_current > 35:
            value = -1.0
            explanation = f"VIX at {vix_current:.1f} indicates extreme fear, a risk-off environment."
        elif vix_current > 25:
            value = -0.6
            explanation = f"VIX at {vix_current:.1f} indicates elevated fear; caution advised."
        elif vix_current > 20:
            value = -0.3
            explanation = f"VIX at {vix_current:.1f} indicates above-average volatility."
        elif vix_current < 12:
            value = 0.5
            explanation = (
                f"VIX at {vix_current:.1f} indicates very low fear; "
                "bullish but watch for complacency."
            )
        elif vix_current < 15:
            value = 0.7
            explanation = f"VIX at {vix_current:.1f} indicates low fear, a favorable risk environment."
        else:
            value = 0.2
            explanation = f"VIX at {vix_current:.1f} indicates normal market conditions."

        if vix_average:
            vix_vs_average = (vix_current - vix_average) / vix_average
            if vix_vs_average > 0.2:
                value = clamp(value - 0.2)
                explanation += " VIX rising vs 20-period average."
            elif vix_vs_average < -0.2:
                value = clamp(value + 0.2)
                explanation += " VIX falling vs 20-period average."

    confidence = VOLATILITY_CONFIDENCE[0] if vix_current is not None else VOLATILITY_CONFIDENCE[1]

    return _result(
        "Volatility Signal",
        value,
        confidence,
        explanation,
        {
            "vixCurrent": vix_current,
            "vix20dayMA": _round2(vix_average),
        },
        now,
    )


# =============================================================================
# Credit
# =============================================================================

def calculate_credit_signal(
    baa_spread_series: Sequence[Observation],
    aaa_spread_series: Sequence[Observation],
    now: datetime | None = None,
) -> SignalResult:
    """
    Credit signal from the Baa corporate spread level and momentum.

    Widening spreads = credit stress = bearish; tight spreads = risk appetite.
    A 3-period move of more than half a point shifts the score by 0.3.

    FRED series: BAA10Y, AAA10Y
    """
    baa_spread = latest_value(baa_spread_series)
    aaa_spread = latest_value(aaa_spread_series)
    baa_spread_before = value_n_periods_ago(baa_spread_series, CHANGE_PERIODS)

    spread_change = None
    if baa_spread is not None and baa_spread_before is not None:
        spread_change = baa_spread - baa_spread_before

    risk_premium = None
    if baa_spread is not None and aaa_spread is not None:
        risk_premium = baa_spread - aaa_spread

    value = 0.0
    explanation = ""

    if baa_spread is not None:
        if baa_spread > 4:
            value = -0.8
            explanation = f"Baa spread at {baa_spread:.2f}% indicates significant credit stress."
        elif baa_spread > 3:
            value = -0.4
            explanation = f"Baa spread at {baa_spread:.2f}% indicates elevated credit risk."
        elif baa_spread < 1.5:
            value = 0.6
            explanation = f"Baa spread at {baa_spread:.2f}% indicates strong risk appetite."
        elif baa_spread < 2:
            value = 0.3
            explanation = f"Baa spread at {baa_spread:.2f}% indicates healthy credit conditions."
        else:
            explanation = f"Baa spread at {baa_spread:.2f}% indicates normal credit conditions."

        if spread_change is not None:
            if spread_change > 0.5:
                value = clamp(value - 0.3)
                explanation += f" Spreads widening rapidly (+{spread_change:.2f}% over 3 periods)."
            elif spread_change < -0.5:
                value = clamp(value + 0.3)
                explanation += f" Spreads tightening ({spread_change:.2f}% over 3 periods)."

    confidence = CREDIT_CONFIDENCE[0] if baa_spread is not None else CREDIT_CONFIDENCE[1]

    return _result(
        "Credit Signal",
        value,
        confidence,
        explanation,
        {
            "baaSpread": baa_spread,
            "aaaSpread": aaa_spread,
            "baaSpreadChange": _round2(spread_change),
            "riskPremium": _round2(risk_premium),
        },
        now,
    )


# =============================================================================
# Housing
# =============================================================================

def calculate_housing_signal(
    home_prices: Sequence[Observation],
    housing_starts: Sequence[Observation],
    now: datetime | None = None,
) -> SignalResult:
    """
    Housing signal from home-price momentum and housing-starts trend.

    Home price YoY% (60%): >10 strong, >5 healthy, <-5 weak, <0 cooling,
    otherwise stable. Housing starts 3-period % change (40%): beyond +/-10%.

    FRED series: CSUSHPISA, HOUST
    """
    home_price_current = latest_value(home_prices)
    home_price_year_ago = value_n_periods_ago(home_prices, YOY_PERIODS)
    starts_current = latest_value(housing_starts)
    starts_before = value_n_periods_ago(housing_starts, CHANGE_PERIODS)

    home_price_yoy = _pct_change(home_price_current, home_price_year_ago)
    starts_change = _pct_change(starts_current, starts_before)

    price_signal = 0.0
    starts_signal = 0.0
    explanation = ""

    if home_price_yoy is not None:
        if home_price_yoy > 10:
            price_signal = 0.5
            explanation = f"Home prices up {home_price_yoy:.1f}% YoY, a strong housing market."
        elif home_price_yoy > 5:
            price_signal = 0.3
            explanation = f"Home prices up {home_price_yoy:.1f}% YoY, healthy appreciation."
        elif home_price_yoy < -5:
            price_signal = -0.6
            explanation = f"Home prices down {abs(home_price_yoy):.1f}% YoY, housing weakness."
        elif home_price_yoy < 0:
            price_signal = -0.3
            explanation = f"Home prices down {abs(home_price_yoy):.1f}% YoY, a cooling market."
        else:
            price_signal = 0.1
            explanation = f"Home prices up {home_price_yoy:.1f}% YoY, a stable market."

    if starts_change is not None:
        if starts_change > 10:
            starts_signal = 0.4
            explanation += f" Housing starts up {starts_change:.1f}% over 3 periods."
        elif starts_change < -10:
            starts_signal = -0.4
            explanation += f" Housing starts down {abs(starts_change):.1f}% over 3 periods."

    value = price_signal * HOME_PRICE_WEIGHT + starts_signal * HOUSING_STARTS_WEIGHT
    confidence = (
        HOUSING_CONFIDENCE[0] if home_price_current is not None else HOUSING_CONFIDENCE[1]
    )

    return _result(
        "Housing Signal",
        value,
        confidence,
        explanation,
        {
            "homePriceIndex": home_price_current,
            "homePriceYoYChange": _round2(home_price_yoy),
            "housingStarts": starts_current,
            "housingStartsChange3m": _round2(starts_change),
        },
        now,
    )
