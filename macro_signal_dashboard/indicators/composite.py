"""Blend the four sub-signals into one composite score."""

from datetime import datetime

from macro_signal_dashboard.models.signals import (
    SignalResult,
    clamp,
    get_interpretation,
    round_half_up,
)
from macro_signal_dashboard.models.timestamps import utc_now


# Composite weights (sum to 1)
WEIGHTS = {
    "rate": 0.30,  # Monetary policy is the key driver
    "volatility": 0.25,  # Market sentiment
    "credit": 0.25,  # Financial conditions
    "housing": 0.20,  # Economic health
}

# |value| above this lists a component as a bullish/bearish factor
FACTOR_THRESHOLD = 0.2

FACTOR_PHRASES = {
    "rate": ("supportive monetary policy", "tightening monetary policy"),
    "volatility": ("low market volatility", "elevated market fear"),
    "credit": ("healthy credit conditions", "credit stress"),
    "housing": ("strong housing market", "housing weakness"),
}


def combine(
    rate: SignalResult,
    volatility: SignalResult,
    credit: SignalResult,
    housing: SignalResult,
    now: datetime | None = None,
) -> SignalResult:
    """
    Weighted blend of the four signals.

    Value and confidence are both weighted sums; only the value is clamped
    (weights sum to 1, so confidence stays in [0, 1]). ``indicators`` carries
    the weights and each weighted contribution for auditing.
    """
    components = {
        "rate": rate,
        "volatility": volatility,
        "credit": credit,
        "housing": housing,
    }

    value = clamp(sum(components[k].value * w for k, w in WEIGHTS.items()))
    confidence = sum(components[k].confidence * w for k, w in WEIGHTS.items())
    published = round_half_up(value)

    bullish_factors = []
    bearish_factors = []
    for key, signal in components.items():
        bullish_phrase, bearish_phrase = FACTOR_PHRASES[key]
        if signal.value > FACTOR_THRESHOLD:
            bullish_factors.append(bullish_phrase)
        elif signal.value < -FACTOR_THRESHOLD:
            bearish_factors.append(bearish_phrase)

    if published > 0.3:
        explanation = "Macro environment is favorable for risk assets."
    elif published < -0.3:
        explanation = "Macro environment is challenging for risk assets."
    else:
        explanation = "Macro environment is mixed."

    if bullish_factors:
        explanation += f" Bullish factors: {', '.join(bullish_factors)}."
    if bearish_factors:
        explanation += f" Bearish factors: {', '.join(bearish_factors)}."

    indicators: dict[str, float | None] = {f"{k}Weight": w for k, w in WEIGHTS.items()}
    indicators.update({
        f"{k}Contribution": round_half_up(components[k].value * w) for k, w in WEIGHTS.items()
    })

    return SignalResult(
        name="Composite Signal",
        value=published,
        interpretation=get_interpretation(published),
        confidence=round_half_up(confidence),
        explanation=explanation,
        indicators=indicators,
        updated_at=now or utc_now(),
    )
