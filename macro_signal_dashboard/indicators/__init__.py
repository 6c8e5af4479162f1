"""Trading signal calculations."""

from macro_signal_dashboard.indicators.calculator import SignalCalculator
from macro_signal_dashboard.indicators.composite import WEIGHTS, combine
from macro_signal_dashboard.indicators.signals import (
    calculate_credit_signal,
    calculate_housing_signal,
    calculate_rate_signal,
    calculate_volatility_signal,
)

__all__ = [
    "SignalCalculator",
    "WEIGHTS",
    "combine",
    "calculate_credit_signal",
    "calculate_housing_signal",
    "calculate_rate_signal",
    "calculate_volatility_signal",
]
