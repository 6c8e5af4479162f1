"""Alert evaluation engine.

Pure functions, no I/O and no clock of their own: ``now`` is always
passed in. The evaluator never mutates an alert; it returns updated
copies for the caller to persist.

Evaluation order for one alert:
    1. skip if disabled or watching a different signal
    2. in cooldown: advance previous_value, never fire
    3. check the edge condition against the stored previous_value
    4. on a hit, emit a trigger and stamp last_triggered_at
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Mapping, Sequence

from macro_signal_dashboard.models.alerts import AlertCondition, AlertConfig, AlertTrigger
from macro_signal_dashboard.models.signals import SignalType, get_interpretation


@dataclass(frozen=True)
class SignalSnapshot:
    """Current value of one signal."""

    type: SignalType
    value: float


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of evaluating a single alert."""

    trigger: AlertTrigger | None
    updated_alert: AlertConfig


@dataclass
class BatchEvaluationResult:
    """Outcome of evaluating a list of alerts."""

    triggers: list[AlertTrigger] = field(default_factory=list)
    updated_alerts: list[AlertConfig] = field(default_factory=list)


def _cooldown_end(alert: AlertConfig) -> datetime | None:
    if alert.last_triggered_at is None:
        return None
    return alert.last_triggered_at + timedelta(minutes=alert.cooldown_minutes)


def is_in_cooldown(alert: AlertConfig, now: datetime) -> bool:
    """True while ``now`` is before last trigger + cooldown."""
    cooldown_end = _cooldown_end(alert)
    return cooldown_end is not None and now < cooldown_end


def get_cooldown_remaining(alert: AlertConfig, now: datetime) -> int:
    """Whole seconds left in cooldown (rounded up), 0 when armed."""
    cooldown_end = _cooldown_end(alert)
    if cooldown_end is None:
        return 0
    remaining = (cooldown_end - now).total_seconds()
    return max(0, math.ceil(remaining))


def check_condition(
    condition: AlertCondition,
    current: float,
    previous: float | None,
    threshold: float,
) -> bool:
    """
    Edge-triggered condition check.

    Returns False whenever ``previous`` is None: the first observation only
    establishes a baseline. ``threshold`` is ignored for any_change, which
    compares interpretation buckets instead.
    """
    if previous is None:
        return False

    if condition is AlertCondition.CROSSES_ABOVE:
        return previous <= threshold and current > threshold
    if condition is AlertCondition.CROSSES_BELOW:
        return previous >= threshold and current < threshold
    if condition is AlertCondition.ANY_CHANGE:
        return get_interpretation(current) != get_interpretation(previous)

    raise ValueError(f"Unhandled alert condition: {condition!r}")


def evaluate_alert(alert: AlertConfig, signal: SignalSnapshot, now: datetime) -> EvaluationResult:
    """Evaluate one alert against a signal snapshot."""
    if not alert.enabled or alert.signal_type != signal.type:
        return EvaluationResult(trigger=None, updated_alert=alert)

    # Keep edge-detection state moving while suppressed, so a persisting
    # edge can fire as soon as the cooldown ends.
    if is_in_cooldown(alert, now):
        return EvaluationResult(
            trigger=None,
            updated_alert=alert.model_copy(update={"previous_value": signal.value}),
        )

    previous = alert.previous_value
    if not check_condition(alert.condition, signal.value, previous, alert.threshold):
        return EvaluationResult(
            trigger=None,
            updated_alert=alert.model_copy(update={"previous_value": signal.value}),
        )

    trigger = AlertTrigger(
        alert_id=alert.id,
        signal_type=alert.signal_type,
        previous_value=previous if previous is not None else signal.value,
        current_value=signal.value,
        threshold=alert.threshold,
        condition=alert.condition,
        triggered_at=now,
    )
    return EvaluationResult(
        trigger=trigger,
        updated_alert=alert.model_copy(
            update={"previous_value": signal.value, "last_triggered_at": now}
        ),
    )


def evaluate_all_alerts(
    alerts: Sequence[AlertConfig],
    signals: Mapping[str, float],
    now: datetime,
) -> BatchEvaluationResult:
    """
    Evaluate every alert against the current signal values.

    Alerts whose signal is missing from ``signals`` pass through unchanged.
    ``updated_alerts`` matches ``alerts`` in order and length.
    """
    result = BatchEvaluationResult()

    for alert in alerts:
        value = signals.get(alert.signal_type.value)
        if value is None:
            result.updated_alerts.append(alert)
            continue

        evaluation = evaluate_alert(
            alert, SignalSnapshot(type=alert.signal_type, value=value), now
        )
        if evaluation.trigger is not None:
            result.triggers.append(evaluation.trigger)
        result.updated_alerts.append(evaluation.updated_alert)

    return result
