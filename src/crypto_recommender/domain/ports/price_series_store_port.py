"""
Port (interface) for the per-symbol price series store.
Infrastructure adapters (e.g. InMemoryPriceSeriesStore) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from crypto_recommender.domain.entities.crypto_price import CryptoPrice


class IPriceSeriesStore(ABC):
    @abstractmethod
    def contains(self, symbol: str) -> bool:
        """Return True if *symbol* (case-insensitive) has already been loaded."""
        ...

    @abstractmethod
    def put_if_absent(self, symbol: str, records: Iterable[CryptoPrice]) -> bool:
        """Publish the full series for *symbol* unless one is already present.

        The series becomes visible to readers as a whole. Returns False, and
        leaves the stored series untouched, when the symbol was already loaded.
        """
        ...

    @abstractmethod
    def get(self, symbol: str) -> Optional[tuple[CryptoPrice, ...]]:
        """Return the immutable series for *symbol*, or None if never loaded."""
        ...

    @abstractmethod
    def symbols(self) -> list[str]:
        """Return the loaded symbols in load order."""
        ...

    @abstractmethod
    def snapshot(self) -> dict[str, tuple[CryptoPrice, ...]]:
        """Return a point-in-time copy of the whole store."""
        ...
