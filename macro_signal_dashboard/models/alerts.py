"""Alert configuration and trigger models.

Alerts are edge-triggered: they fire when a signal crosses a threshold
(or changes interpretation bucket), not while it stays beyond it. After
firing, an alert stays quiet for ``cooldown_minutes``.

Each entity is one pydantic model (camelCase aliases on the wire) paired
with a validator that turns an untrusted payload into the model or raises
ValidationError. Validation happens at the boundary only.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator, ConfigDict, Field, StrictBool, field_validator

from macro_signal_dashboard.models.base import CamelModel, validate_model
from macro_signal_dashboard.models.signals import SignalType
from macro_signal_dashboard.models.timestamps import as_utc, format_timestamp


DEFAULT_COOLDOWN_MINUTES = 5
MIN_COOLDOWN_MINUTES = 1
MAX_COOLDOWN_MINUTES = 1440


def _require_number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("Must be a number")
    return value


Number = Annotated[float, BeforeValidator(_require_number), Field(allow_inf_nan=False)]
Threshold = Annotated[Number, Field(ge=-1, le=1)]
CooldownMinutes = Annotated[
    int,
    BeforeValidator(_require_number),
    Field(ge=MIN_COOLDOWN_MINUTES, le=MAX_COOLDOWN_MINUTES),
]
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class AlertCondition(str, Enum):
    """Edge-triggered alert conditions."""

    CROSSES_ABOVE = "crosses_above"  # was <= threshold, now > threshold
    CROSSES_BELOW = "crosses_below"  # was >= threshold, now < threshold
    ANY_CHANGE = "any_change"  # interpretation bucket changed


class AlertConfig(CamelModel):
    """A configured alert plus its edge-detection state."""

    id: str
    signal_type: SignalType = Field(alias="signalType")
    condition: AlertCondition
    threshold: Threshold
    created_at: UtcDatetime = Field(alias="createdAt")
    enabled: StrictBool = True
    cooldown_minutes: CooldownMinutes = Field(DEFAULT_COOLDOWN_MINUTES, alias="cooldownMinutes")
    last_triggered_at: UtcDatetime | None = Field(None, alias="lastTriggeredAt")
    previous_value: Number | None = Field(None, alias="previousValue")

    @field_validator("id")
    @classmethod
    def _id_is_uuid(cls, value: str) -> str:
        try:
            uuid.UUID(value)
        except ValueError:
            raise ValueError("Must be a UUID") from None
        return value

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "signalType": self.signal_type.value,
            "condition": self.condition.value,
            "threshold": self.threshold,
            "enabled": self.enabled,
            "createdAt": format_timestamp(self.created_at),
            "cooldownMinutes": self.cooldown_minutes,
        }
        if self.last_triggered_at is not None:
            data["lastTriggeredAt"] = format_timestamp(self.last_triggered_at)
        if self.previous_value is not None:
            data["previousValue"] = self.previous_value
        return data


@dataclass(frozen=True)
class AlertTrigger:
    """Event emitted exactly once when an alert fires."""

    alert_id: str
    signal_type: SignalType
    previous_value: float
    current_value: float
    threshold: float
    condition: AlertCondition
    triggered_at: datetime
    acknowledged: bool = False

    def to_dict(self) -> dict:
        return {
            "alertId": self.alert_id,
            "signalType": self.signal_type.value,
            "previousValue": self.previous_value,
            "currentValue": self.current_value,
            "threshold": self.threshold,
            "condition": self.condition.value,
            "triggeredAt": format_timestamp(self.triggered_at),
            "acknowledged": self.acknowledged,
        }


class CreateAlert(CamelModel):
    """Request to create an alert (no system-assigned fields)."""

    signal_type: SignalType = Field(alias="signalType")
    condition: AlertCondition
    threshold: Threshold
    enabled: StrictBool = True
    cooldown_minutes: CooldownMinutes = Field(DEFAULT_COOLDOWN_MINUTES, alias="cooldownMinutes")


class AlertUpdate(CamelModel):
    """User-editable fields; None means leave unchanged. Anything else is rejected."""

    model_config = ConfigDict(extra="forbid")

    enabled: StrictBool | None = None
    threshold: Threshold | None = None
    cooldown_minutes: CooldownMinutes | None = Field(None, alias="cooldownMinutes")


def validate_create_alert(data: Any) -> CreateAlert:
    return validate_model(CreateAlert, data, "Invalid alert configuration")


def validate_alert_update(data: Any) -> AlertUpdate:
    return validate_model(AlertUpdate, data, "Invalid update data")


def validate_alert_config(data: Any) -> AlertConfig:
    """Validate a full stored alert document."""
    return validate_model(AlertConfig, data, "Invalid alert configuration")
