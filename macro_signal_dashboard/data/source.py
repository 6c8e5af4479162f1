"""Series source contract and concurrent multi-series fetching."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Protocol, Sequence

from macro_signal_dashboard.errors import SeriesFetchError
from macro_signal_dashboard.models.market_data import Observation


logger = logging.getLogger(__name__)


class SeriesSource(Protocol):
    """Anything that can return observations for a FRED series id."""

    def get_series(self, series_id: str, start_date: date | None = None) -> list[Observation]:
        ...


def fetch_concurrently(
    source: SeriesSource,
    series_ids: Sequence[str],
    start_date: date | None = None,
    max_workers: int = 8,
) -> dict[str, list[Observation]]:
    """
    Fetch several series in parallel.

    All-or-nothing: if any fetch fails the whole call raises, since mixing
    a missing series into a merge or signal gives confidently wrong output.

    Raises:
        SeriesFetchError: for the first failing series (in request order)
    """
    unique_ids = list(dict.fromkeys(series_ids))
    if not unique_ids:
        return {}

    workers = max(1, min(max_workers, len(unique_ids)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            series_id: pool.submit(source.get_series, series_id, start_date)
            for series_id in unique_ids
        }

    results: dict[str, list[Observation]] = {}
    for series_id, future in futures.items():
        try:
            results[series_id] = future.result()
        except Exception as e:
            logger.error(f"Error fetching {series_id}: {e}")
            raise SeriesFetchError(series_id, e) from e

    return results
