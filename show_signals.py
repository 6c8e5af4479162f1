"""Print the current trading signals."""

import logging

from macro_signal_dashboard.config import Settings
from macro_signal_dashboard.data import FredFetcher
from macro_signal_dashboard.indicators import SignalCalculator


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    settings = Settings()
    with FredFetcher(settings) as fetcher:
        report = SignalCalculator(fetcher, max_workers=settings.max_fetch_workers).calculate_all()

    print(f"\nMacro Signals - As of {report.calculated_at:%Y-%m-%d %H:%M} UTC")
    print("=" * 70)

    for signal_type, signal in report.signals.items():
        print(
            f"\n{signal.name:22} | {signal.value:+.2f} | {signal.interpretation.value:15} "
            f"| conf {signal.confidence:.2f}"
        )
        print(f"  {signal.explanation}")
        for name, value in signal.indicators.items():
            shown = "N/A" if value is None else f"{value:.2f}"
            print(f"    {name:24} {shown:>10}")

    print("\n" + "-" * 70)


if __name__ == "__main__":
    main()
