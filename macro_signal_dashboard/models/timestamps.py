"""UTC timestamp helpers shared by signals and alerts."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(ts: datetime) -> datetime:
    """Attach UTC to naive timestamps; aware ones are converted."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 with a trailing Z for UTC."""
    return ts.isoformat().replace("+00:00", "Z")
