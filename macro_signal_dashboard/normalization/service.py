"""Validate, fetch and merge a normalization request."""

import logging
from typing import Any

from macro_signal_dashboard.config import ALLOWED_SERIES
from macro_signal_dashboard.data.source import SeriesSource, fetch_concurrently
from macro_signal_dashboard.errors import SeriesNotAllowedError
from macro_signal_dashboard.models.market_data import MergedSeriesResult, SeriesInput
from macro_signal_dashboard.models.requests import NormalizeRequest, validate_normalize_request
from macro_signal_dashboard.normalization.merge import filter_date_range, merge_multiple_series


logger = logging.getLogger(__name__)


class NormalizationService:
    """Turns a normalize request into a merged, date-aligned dataset."""

    def __init__(
        self,
        source: SeriesSource,
        allowed_series: frozenset[str] | set[str] = ALLOWED_SERIES,
        max_workers: int = 8,
    ) -> None:
        self.source = source
        self.allowed_series = allowed_series
        self.max_workers = max_workers

    def normalize(self, payload: Any) -> MergedSeriesResult:
        """
        Validate ``payload`` and merge the requested series.

        Raises:
            ValidationError: malformed request
            SeriesNotAllowedError: a series is not whitelisted
            SeriesFetchError: any series failed to fetch
        """
        return self.run(validate_normalize_request(payload))

    def run(self, request: NormalizeRequest) -> MergedSeriesResult:
        for spec in request.series:
            if spec.series_id not in self.allowed_series:
                raise SeriesNotAllowedError(spec.series_id)

        fetched = fetch_concurrently(
            self.source,
            [spec.series_id for spec in request.series],
            max_workers=self.max_workers,
        )

        result = merge_multiple_series(
            [SeriesInput(key=spec.key, data=fetched[spec.series_id]) for spec in request.series],
            request.merge_config,
        )
        logger.info(
            f"Merged {len(request.series)} series into {len(result.data)} points "
            f"({request.merge_config.fill_method.value} fill)"
        )

        if request.start and request.end:
            result = filter_date_range(result, request.start, request.end)

        return result
