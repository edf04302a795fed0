"""
Port (interface) for price file readers.
Infrastructure adapters (e.g. CsvPriceFileReader) must implement this interface.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TextIO

from crypto_recommender.domain.entities.crypto_price import CryptoPrice


class IPriceFileReader(ABC):
    @abstractmethod
    def read(self, symbol: str, stream: TextIO) -> list[CryptoPrice]:
        """Parse a price stream for *symbol* into records.

        Raises:
            DataProcessingError: on any malformed row. No partial result is returned.
        """
        ...

    @abstractmethod
    def read_file(self, symbol: str, path: Path) -> list[CryptoPrice]:
        """Open *path* and parse it with read()."""
        ...
