"""Exceptions raised at the system boundary."""


class ValidationError(ValueError):
    """Input rejected by a boundary validator.

    ``issues`` holds ``(path, message)`` pairs, one per failed rule.
    """

    def __init__(self, message: str, issues: list[tuple[str, str]] | None = None) -> None:
        self.issues = issues or []
        if self.issues:
            details = "; ".join(f"{path or '<root>'}: {msg}" for path, msg in self.issues)
            message = f"{message} ({details})"
        super().__init__(message)


class SeriesNotAllowedError(ValueError):
    """Requested series is not in the whitelist."""

    def __init__(self, series_id: str) -> None:
        self.series_id = series_id
        super().__init__(f"Series '{series_id}' is not in the allowed list")


class SeriesFetchError(RuntimeError):
    """Fetching one series failed."""

    def __init__(self, series_id: str, cause: Exception) -> None:
        self.series_id = series_id
        self.cause = cause
        super().__init__(f"Failed to fetch series {series_id}: {cause}")


class AlertNotFoundError(KeyError):
    """No alert with the given id."""

    def __init__(self, alert_id: str) -> None:
        self.alert_id = alert_id
        super().__init__(alert_id)

    def __str__(self) -> str:
        return f"Alert {self.alert_id} not found"
