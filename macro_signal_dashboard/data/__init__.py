"""Data fetching, caching and alert storage."""

from .fred_fetcher import FredFetcher
from .cache import DataCache
from .alert_store import AlertStore, InMemoryAlertStore, SqliteAlertStore
from .source import SeriesSource, fetch_concurrently

__all__ = [
    "FredFetcher",
    "DataCache",
    "AlertStore",
    "InMemoryAlertStore",
    "SqliteAlertStore",
    "SeriesSource",
    "fetch_concurrently",
]
