"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timezone
from pathlib import Path

import pytest

from crypto_recommender.domain.entities.crypto_price import CryptoPrice
from crypto_recommender.infrastructure.config.settings import reset_settings
from crypto_recommender.infrastructure.csv_files.csv_price_reader import CsvPriceFileReader
from crypto_recommender.infrastructure.store.in_memory_series_store import InMemoryPriceSeriesStore

HEADER = "timestamp,symbol,price"

# 2022-01-01 04:00, 07:00, 10:00, 11:00 and 14:00 UTC
BTC_ROWS = [
    (1641009600000, 46813.21),
    (1641020400000, 46979.61),
    (1641031200000, 47143.98),
    (1641034800000, 46871.09),
    (1641045600000, 47023.24),
]
ETH_ROWS = [
    (1641009600000, 3681.1),
    (1641020400000, 3690.5),
    (1641031200000, 3700.2),
    (1641034800000, 3685.8),
    (1641045600000, 3695.0),
]


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up test environment variables."""
    os.environ.setdefault("LOG_LEVEL", "WARNING")
    os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
    yield


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()


def csv_content(symbol: str, rows) -> str:
    lines = [HEADER] + [f"{ts},{symbol},{price}" for ts, price in rows]
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_price_file():
    """Factory writing `<SYMBOL>_values.csv` into a directory."""

    def _write(directory: Path, symbol: str, rows, content: str | None = None) -> Path:
        path = directory / f"{symbol}_values.csv"
        path.write_text(content if content is not None else csv_content(symbol, rows), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def price_dir(tmp_path, write_price_file) -> Path:
    """Directory with BTC and ETH files, all records on 2022-01-01 UTC."""
    write_price_file(tmp_path, "BTC", BTC_ROWS)
    write_price_file(tmp_path, "ETH", ETH_ROWS)
    return tmp_path


@pytest.fixture
def utc_reader() -> CsvPriceFileReader:
    return CsvPriceFileReader(tz=timezone.utc)


def utc(year, month, day, hour=0, minute=0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def series(symbol: str, *points) -> list[CryptoPrice]:
    """Build records from (datetime, price) pairs."""
    return [CryptoPrice(timestamp=ts, symbol=symbol, price=price) for ts, price in points]


@pytest.fixture
def loaded_store() -> InMemoryPriceSeriesStore:
    """Store with BTC and ETH on 2022-01-01, three hours apart."""
    store = InMemoryPriceSeriesStore()
    store.put_if_absent(
        "BTC",
        series("BTC", *[(utc(2022, 1, 1, 3 * i), p) for i, (_, p) in enumerate(BTC_ROWS)]),
    )
    store.put_if_absent(
        "ETH",
        series("ETH", *[(utc(2022, 1, 1, 3 * i), p) for i, (_, p) in enumerate(ETH_ROWS)]),
    )
    return store
