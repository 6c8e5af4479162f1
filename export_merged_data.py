"""Export a blended dataset of FRED series on one date axis."""

import argparse
import json
import logging
from pathlib import Path

from macro_signal_dashboard.config import Settings
from macro_signal_dashboard.data import FredFetcher
from macro_signal_dashboard.normalization import NormalizationService


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Merge FRED series onto a common timeline")
    parser.add_argument(
        "series",
        nargs="+",
        help="SERIES_ID or SERIES_ID=key (e.g. FEDFUNDS=fedFunds UNRATE)",
    )
    parser.add_argument("--fill", choices=["forward", "linear", "none"], default="forward")
    parser.add_argument("--inner", action="store_true", help="Only dates present in every series")
    parser.add_argument("--start", help="YYYY-MM-DD")
    parser.add_argument("--end", help="YYYY-MM-DD")
    parser.add_argument("--output", type=Path, default=Path("merged_data.json"))
    args = parser.parse_args()

    specs = []
    for item in args.series:
        series_id, _, key = item.partition("=")
        specs.append({"seriesId": series_id, "key": key or series_id})

    payload = {
        "series": specs,
        "config": {"fillMethod": args.fill, "innerJoin": args.inner},
    }
    if args.start and args.end:
        payload["dateRange"] = {"start": args.start, "end": args.end}

    settings = Settings()
    with FredFetcher(settings) as fetcher:
        result = NormalizationService(
            fetcher, max_workers=settings.max_fetch_workers
        ).normalize(payload)

    if args.output.suffix == ".csv":
        result.to_frame().to_csv(args.output)
    else:
        with open(args.output, "w") as f:
            json.dump(result.to_dict(), f)

    for info in result.series_info:
        print(
            f"  {info.key:20} {info.original_frequency.value:10} "
            f"{info.original_count:6} obs, {info.filled_count:6} filled"
        )
    print(f"Saved {len(result.data)} points to {args.output}")


if __name__ == "__main__":
    main()
