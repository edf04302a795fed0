#!/usr/bin/env python
"""
CLI entry point: scan a price directory once and print the normalized-range ranking.

This script is the Composition Root for a one-shot run: it wires the CSV reader
and an in-memory store to DirectoryScanService, then queries StatisticsEngine.

Example usage:
    crypto-recommender-scan ./prices
    crypto-recommender-scan ./prices --date 2022-01-01 --timezone UTC
"""

import argparse
import sys
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from crypto_recommender.application.services.directory_scanner import DirectoryScanService
from crypto_recommender.application.services.statistics_engine import StatisticsEngine
from crypto_recommender.application.use_cases.get_all_crypto_statistics import GetAllCryptoStatisticsUseCase
from crypto_recommender.application.use_cases.get_highest_normalized_crypto import GetHighestNormalizedCryptoUseCase
from crypto_recommender.domain.exceptions import CryptoRecommendationError
from crypto_recommender.infrastructure.config.settings import get_settings
from crypto_recommender.infrastructure.csv_files.csv_price_reader import CsvPriceFileReader
from crypto_recommender.infrastructure.observability.logging import configure_logging
from crypto_recommender.infrastructure.store.in_memory_series_store import InMemoryPriceSeriesStore


def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise argparse.ArgumentTypeError(f"unknown time zone: {name!r}") from exc


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Scan crypto price files and rank them by normalized range",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=settings.crypto_directory_path,
        help="Directory holding <SYMBOL>_values.csv files",
    )
    parser.add_argument("--date", help="Also report the best symbol for this day (YYYY-MM-DD)")
    parser.add_argument(
        "--timezone",
        type=_zone,
        default=settings.crypto_timezone,
        help="IANA zone for timestamps and day boundaries (default: host local zone)",
    )
    return parser.parse_args(args)


def main(args: list[str] | None = None) -> int:
    load_dotenv()
    parsed = parse_args(args)
    configure_logging()

    store = InMemoryPriceSeriesStore()
    scanner = DirectoryScanService(parsed.directory, CsvPriceFileReader(tz=parsed.timezone), store)
    engine = StatisticsEngine(store)

    try:
        scanner.scan()
        ranking = GetAllCryptoStatisticsUseCase(engine).execute()
        best = GetHighestNormalizedCryptoUseCase(engine).execute(parsed.date) if parsed.date else None
    except CryptoRecommendationError as exc:
        cause = f" ({exc.__cause__})" if exc.__cause__ else ""
        print(f"Error: {exc}{cause}", file=sys.stderr)
        return 1

    print(f"{'SYMBOL':<8} {'OLDEST':>14} {'NEWEST':>14} {'MIN':>14} {'MAX':>14} {'NORM. RANGE':>12}")
    for s in ranking:
        print(
            f"{s.symbol:<8} {s.oldest_price:>14.4f} {s.newest_price:>14.4f} "
            f"{s.min_price:>14.4f} {s.max_price:>14.4f} {s.normalized_range:>12.6f}"
        )
    if best is not None:
        print(f"\nHighest normalized range on {parsed.date}: {best}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
