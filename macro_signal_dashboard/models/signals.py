"""Signal value objects and the shared interpretation mapping."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class SignalType(str, Enum):
    """Signals an alert can watch."""

    RATE = "rate"
    VOLATILITY = "volatility"
    CREDIT = "credit"
    HOUSING = "housing"
    COMPOSITE = "composite"


class Interpretation(str, Enum):
    """Bucketed reading of a signal value."""

    STRONG_BEARISH = "strong_bearish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"
    BULLISH = "bullish"
    STRONG_BULLISH = "strong_bullish"


# Bucket boundaries shared by the calculators and the alert evaluator
STRONG_THRESHOLD = 0.6
MILD_THRESHOLD = 0.2


def get_interpretation(value: float) -> Interpretation:
    """Map a signal value in [-1, 1] to its interpretation bucket."""
    if value >= STRONG_THRESHOLD:
        return Interpretation.STRONG_BULLISH
    if value >= MILD_THRESHOLD:
        return Interpretation.BULLISH
    if value <= -STRONG_THRESHOLD:
        return Interpretation.STRONG_BEARISH
    if value <= -MILD_THRESHOLD:
        return Interpretation.BEARISH
    return Interpretation.NEUTRAL


def clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float, places: int = 2) -> float:
    """Round ties toward +infinity (0.125 -> 0.13, -0.125 -> -0.12)."""
    scale = 10**places
    return math.floor(value * scale + 0.5) / scale


@dataclass(frozen=True)
class SignalResult:
    """Result of a single signal calculation."""

    name: str
    value: float  # -1 to 1
    interpretation: Interpretation
    confidence: float  # 0 to 1
    explanation: str
    indicators: dict[str, float | None]  # Raw inputs used
    updated_at: datetime

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "value": self.value,
            "interpretation": self.interpretation.value,
            "confidence": self.confidence,
            "explanation": self.explanation,
            "indicators": dict(self.indicators),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass
class SignalsReport:
    """All signals from one calculation pass."""

    signals: dict[SignalType, SignalResult]
    calculated_at: datetime
    version: str = field(default="1.0.0")

    def values(self) -> dict[str, float]:
        """Signal type -> current value, as consumed by the alert evaluator."""
        return {signal_type.value: result.value for signal_type, result in self.signals.items()}

    def to_dict(self) -> dict:
        return {
            "signals": {t.value: r.to_dict() for t, r in self.signals.items()},
            "meta": {
                "calculatedAt": self.calculated_at.isoformat(),
                "version": self.version,
            },
        }
