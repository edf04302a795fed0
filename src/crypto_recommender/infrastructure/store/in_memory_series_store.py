"""
Infrastructure adapter: process-lifetime dict -> IPriceSeriesStore.

Each series is stored as a tuple, so readers always work on an immutable
snapshot and a symbol becomes visible only once its full series is published.
"""

import threading
from typing import Iterable, Optional

from crypto_recommender.domain.entities.crypto_price import CryptoPrice
from crypto_recommender.domain.ports.price_series_store_port import IPriceSeriesStore


class InMemoryPriceSeriesStore(IPriceSeriesStore):
    """Load-once, append-only symbol -> series mapping guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._series: dict[str, tuple[CryptoPrice, ...]] = {}

    def contains(self, symbol: str) -> bool:
        with self._lock:
            return symbol.upper() in self._series

    def put_if_absent(self, symbol: str, records: Iterable[CryptoPrice]) -> bool:
        key = symbol.upper()
        series = tuple(records)
        with self._lock:
            if key in self._series:
                return False
            self._series[key] = series
            return True

    def get(self, symbol: str) -> Optional[tuple[CryptoPrice, ...]]:
        with self._lock:
            return self._series.get(symbol.upper())

    def symbols(self) -> list[str]:
        with self._lock:
            return list(self._series)

    def snapshot(self) -> dict[str, tuple[CryptoPrice, ...]]:
        with self._lock:
            return dict(self._series)

    def __len__(self) -> int:
        with self._lock:
            return len(self._series)
