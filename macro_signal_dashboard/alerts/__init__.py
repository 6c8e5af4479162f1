"""Edge-triggered alerts on signal values."""

from .engine import (
    BatchEvaluationResult,
    EvaluationResult,
    SignalSnapshot,
    check_condition,
    evaluate_alert,
    evaluate_all_alerts,
    get_cooldown_remaining,
    is_in_cooldown,
)
from .service import AlertCheckResult, AlertService

__all__ = [
    "AlertCheckResult",
    "AlertService",
    "BatchEvaluationResult",
    "EvaluationResult",
    "SignalSnapshot",
    "check_condition",
    "evaluate_alert",
    "evaluate_all_alerts",
    "get_cooldown_remaining",
    "is_in_cooldown",
]
