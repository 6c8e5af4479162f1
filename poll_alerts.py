"""Poll the configured alerts on a fixed interval."""

import logging
import time

from macro_signal_dashboard.alerts import AlertService
from macro_signal_dashboard.config import Settings
from macro_signal_dashboard.data import FredFetcher, SqliteAlertStore
from macro_signal_dashboard.errors import SeriesFetchError
from macro_signal_dashboard.indicators import SignalCalculator


logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    settings = Settings()
    with FredFetcher(settings) as fetcher:
        calculator = SignalCalculator(fetcher, max_workers=settings.max_fetch_workers)
        service = AlertService(SqliteAlertStore(settings.alert_db_path), calculator.snapshot)

        logger.info(f"Checking alerts every {settings.alert_poll_seconds}s")
        while True:
            try:
                result = service.check_alerts()
                logger.info(f"Checked {result.checked} alert(s), {len(result.triggered)} triggered")
            except SeriesFetchError as e:
                logger.error(f"Alert check skipped: {e}")
            time.sleep(settings.alert_poll_seconds)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
