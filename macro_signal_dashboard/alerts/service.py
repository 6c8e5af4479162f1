"""Alert management on top of a store and a signal snapshot provider."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping

from macro_signal_dashboard.alerts.engine import evaluate_all_alerts
from macro_signal_dashboard.data.alert_store import AlertStore
from macro_signal_dashboard.errors import AlertNotFoundError, ValidationError
from macro_signal_dashboard.models.alerts import (
    AlertConfig,
    AlertTrigger,
    validate_alert_update,
    validate_create_alert,
)
from macro_signal_dashboard.models.timestamps import format_timestamp, utc_now


logger = logging.getLogger(__name__)

SignalProvider = Callable[[], Mapping[str, float]]


@dataclass
class AlertCheckResult:
    """Outcome of one polling cycle."""

    triggered: list[AlertTrigger] = field(default_factory=list)
    checked: int = 0
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        return {
            "triggered": [t.to_dict() for t in self.triggered],
            "checked": self.checked,
            "timestamp": format_timestamp(self.timestamp),
        }


class AlertService:
    """
    Create, edit, delete and periodically check alerts.

    Checking is a read-modify-write over the store: read every alert,
    evaluate, then write back each returned copy. Overlapping checks on
    the same alert id are not serialized here; the caller must run at
    most one check at a time per store.
    """

    def __init__(self, store: AlertStore, signal_provider: SignalProvider) -> None:
        self.store = store
        self.signal_provider = signal_provider

    def create_alert(self, payload: Any, now: datetime | None = None) -> AlertConfig:
        """
        Validate a create request and store the new alert.

        Raises:
            ValidationError: invalid payload
        """
        request = validate_create_alert(payload)
        alert = AlertConfig(
            id=str(uuid.uuid4()),
            signal_type=request.signal_type,
            condition=request.condition,
            threshold=request.threshold,
            created_at=now or utc_now(),
            enabled=request.enabled,
            cooldown_minutes=request.cooldown_minutes,
        )
        self.store.set(alert.id, alert)
        logger.info(
            f"Created alert {alert.id}: {alert.signal_type.value} "
            f"{alert.condition.value} {alert.threshold}"
        )
        return alert

    def list_alerts(self) -> list[AlertConfig]:
        return self.store.get_all()

    def get_alert(self, alert_id: str) -> AlertConfig:
        """
        Raises:
            ValidationError: malformed id
            AlertNotFoundError: unknown id
        """
        _validate_id(alert_id)
        alert = self.store.get(alert_id)
        if alert is None:
            raise AlertNotFoundError(alert_id)
        return alert

    def update_alert(self, alert_id: str, payload: Any) -> AlertConfig:
        """Apply a user edit to enabled / threshold / cooldownMinutes."""
        existing = self.get_alert(alert_id)
        update = validate_alert_update(payload)

        changes = {
            name: value
            for name, value in (
                ("enabled", update.enabled),
                ("threshold", update.threshold),
                ("cooldown_minutes", update.cooldown_minutes),
            )
            if value is not None
        }
        updated = existing.model_copy(update=changes)
        self.store.set(alert_id, updated)
        return updated

    def delete_alert(self, alert_id: str) -> None:
        self.get_alert(alert_id)
        self.store.delete(alert_id)
        logger.info(f"Deleted alert {alert_id}")

    def check_alerts(self, now: datetime | None = None) -> AlertCheckResult:
        """
        Evaluate every stored alert against a fresh signal snapshot.

        Signal provider failures propagate; alerts are never evaluated
        against substituted values.
        """
        now = now or utc_now()
        alerts = self.store.get_all()
        if not alerts:
            return AlertCheckResult(checked=0, timestamp=now)

        signals = self.signal_provider()
        result = evaluate_all_alerts(alerts, signals, now)

        for updated in result.updated_alerts:
            self.store.set(updated.id, updated)

        for trigger in result.triggers:
            logger.info(
                f"[Alert Check] {trigger.alert_id} triggered: {trigger.signal_type.value} "
                f"{trigger.condition.value} prev={trigger.previous_value:.3f} "
                f"curr={trigger.current_value:.3f} threshold={trigger.threshold}"
            )

        return AlertCheckResult(triggered=result.triggers, checked=len(alerts), timestamp=now)


def _validate_id(alert_id: str) -> None:
    try:
        uuid.UUID(str(alert_id))
    except ValueError:
        raise ValidationError("Invalid alert ID format", [("id", "Must be a UUID")]) from None
