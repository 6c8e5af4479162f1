"""Pydantic base model and boundary validation for request/document schemas."""

from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict

from macro_signal_dashboard.errors import ValidationError


ModelT = TypeVar("ModelT", bound=BaseModel)


class CamelModel(BaseModel):
    """Schema whose wire keys are camelCase aliases of its snake_case fields."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


def reject_bool(value: Any) -> Any:
    """bool is an int subclass; numeric fields must not accept True/False."""
    if isinstance(value, bool):
        raise ValueError("Must be a number")
    return value


def validate_model(model: type[ModelT], data: Any, message: str) -> ModelT:
    """
    Parse ``data`` into ``model``.

    Raises:
        ValidationError: with one ``(dotted.path, message)`` issue per pydantic error
    """
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        issues = [
            (".".join(str(part) for part in error["loc"]), error["msg"])
            for error in e.errors()
        ]
        raise ValidationError(message, issues) from None
