"""FRED API data fetcher with delta updates."""

import logging
import threading
from datetime import date, datetime, timedelta
from typing import Sequence

import httpx

from macro_signal_dashboard.config import Settings, SIGNAL_SERIES
from macro_signal_dashboard.data.cache import DataCache
from macro_signal_dashboard.data.source import fetch_concurrently
from macro_signal_dashboard.models.market_data import Observation, parse_fred_observations


logger = logging.getLogger(__name__)


def _parse_last_updated(value: str | None, default: datetime) -> datetime:
    """Parse FRED's "2024-01-05 07:51:02-06" style stamp, dropping the UTC offset."""
    if not value:
        return default
    return datetime.fromisoformat(value[:19].replace(" ", "T"))


class FredFetcher:
    """Fetches data from FRED API with local caching."""

    BASE_URL = "https://api.stlouisfed.org/fred"

    def __init__(
        self,
        settings: Settings | None = None,
        cache: DataCache | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.settings.validate()
        self.cache = cache or DataCache(self.settings.db_path)
        self._client = client
        self._client_lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(timeout=self.settings.request_timeout)
            return self._client

    def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "FredFetcher":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _fetch_series_info(self, series_id: str) -> dict:
        """Fetch metadata for a series from FRED."""
        response = self.client.get(
            f"{self.BASE_URL}/series",
            params={
                "series_id": series_id,
                "api_key": self.settings.fred_api_key,
                "file_type": "json",
            },
        )
        response.raise_for_status()
        data = response.json()

        if "seriess" not in data or not data["seriess"]:
            raise ValueError(f"Series {series_id} not found")

        return data["seriess"][0]

    def _fetch_observations(
        self, series_id: str, start_date: date | None = None
    ) -> list[Observation]:
        """
        Fetch observations from FRED API.

        Args:
            series_id: FRED series ID
            start_date: Only fetch data after this date (for delta updates)

        Returns:
            Date-ordered observations with FRED's "." placeholders removed
        """
        params = {
            "series_id": series_id,
            "api_key": self.settings.fred_api_key,
            "file_type": "json",
        }

        if start_date:
            # Add 1 day to avoid re-fetching the last date we have
            params["observation_start"] = (start_date + timedelta(days=1)).isoformat()

        response = self.client.get(
            f"{self.BASE_URL}/series/observations",
            params=params,
        )
        response.raise_for_status()
        data = response.json()

        return parse_fred_observations(data.get("observations", []))

    def fetch_series(self, series_id: str, force_full: bool = False) -> list[Observation]:
        """
        Refresh a single series from the API, using delta updates when possible.

        Args:
            series_id: FRED series ID
            force_full: If True, fetch entire history regardless of cache

        Returns:
            Complete series including cached + new data
        """
        logger.info(f"Fetching {series_id}...")

        start_date = None
        if not force_full:
            start_date = self.cache.get_latest_date(series_id)
            if start_date:
                logger.info(f"  Delta update from {start_date}")

        new_data = self._fetch_observations(series_id, start_date)
        fetched_at = datetime.now()

        if new_data:
            rows_stored = self.cache.store_observations(series_id, new_data, fetched_at)
            logger.info(f"  Stored {rows_stored} new observations for {series_id}")

            try:
                info = self._fetch_series_info(series_id)
                self.cache.store_metadata(
                    series_id=series_id,
                    title=info.get("title", ""),
                    frequency=info.get("frequency", ""),
                    units=info.get("units", ""),
                    last_updated=_parse_last_updated(info.get("last_updated"), fetched_at),
                )
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"  Could not fetch metadata for {series_id}: {e}")
        else:
            logger.info(f"  No new data for {series_id}")

        self.cache.touch(series_id, fetched_at)
        return self.cache.get_observations(series_id)

    def is_fresh(self, series_id: str, now: datetime | None = None) -> bool:
        """True if the series was fetched within the cache TTL."""
        last_fetched = self.cache.get_last_fetched(series_id)
        if last_fetched is None:
            return False
        now = now or datetime.now()
        return now - last_fetched < timedelta(hours=self.settings.cache_ttl_hours)

    def get_series(self, series_id: str, start_date: date | None = None) -> list[Observation]:
        """
        Observations for a series from ``start_date`` onward.

        Served from the cache while it is fresh, refreshed from the API otherwise.
        """
        if not self.is_fresh(series_id):
            self.fetch_series(series_id)
        return self.cache.get_observations(series_id, start_date)

    def fetch_many(
        self, series_ids: Sequence[str], start_date: date | None = None
    ) -> dict[str, list[Observation]]:
        """Fetch several series concurrently; any failure fails the whole call."""
        return fetch_concurrently(
            self, series_ids, start_date, max_workers=self.settings.max_fetch_workers
        )

    def get_status(self) -> dict:
        """Get cache status for all signal series."""
        status = self.cache.get_cache_status()

        for series_id, title in SIGNAL_SERIES.items():
            if series_id not in status:
                status[series_id] = {
                    "title": title,
                    "observation_count": 0,
                    "first_date": None,
                    "last_date": None,
                    "last_fetched": None,
                }

        return status


def main() -> None:
    """CLI entry point for fetching data."""
    import argparse
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Fetch FRED series used by the signals")
    parser.add_argument(
        "--full",
        action="store_true",
        help="Force full refresh instead of delta update",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show cache status and exit",
    )
    parser.add_argument(
        "--series",
        type=str,
        help="Fetch specific series only",
    )
    args = parser.parse_args()

    try:
        with FredFetcher() as fetcher:
            if args.status:
                status = fetcher.get_status()
                print("\nCache Status:")
                print("-" * 70)
                for series_id, info in sorted(status.items()):
                    count = info["observation_count"]
                    last = info["last_date"] or "N/A"
                    title = info.get("title") or SIGNAL_SERIES.get(series_id, "")
                    print(f"{series_id:12} | {count:6} obs | Last: {last:10} | {title}")
                return

            series_ids = [args.series] if args.series else list(SIGNAL_SERIES)
            for series_id in series_ids:
                fetcher.fetch_series(series_id, force_full=args.full)

            print("\nDone. Cache status:")
            status = fetcher.get_status()
            for series_id in series_ids:
                info = status.get(series_id, {})
                count = info.get("observation_count", 0)
                last = info.get("last_date", "N/A")
                print(f"  {series_id}: {count} observations, last date: {last}")

    except ValueError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)
    except httpx.HTTPStatusError as e:
        print(f"API error: {e.response.status_code} - {e.response.text}")
        sys.exit(1)


if __name__ == "__main__":
    main()
