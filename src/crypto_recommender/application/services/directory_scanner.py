"""
Application service: discovers `<SYMBOL>_values.csv` files and loads each new
symbol into the series store exactly once.

Business decisions owned here:
  - Load-once: a symbol already in the store is never reloaded, even if its
    file changes or disappears.
  - Fail-fast: the first fault aborts the cycle as a DirectoryScanError.
    Symbols published before the fault stay loaded; the rest are picked up by
    the next cycle.

The file parser (IPriceFileReader) and the store (IPriceSeriesStore) are injected.
"""

from pathlib import Path

import structlog

from crypto_recommender.domain.exceptions import DirectoryNotFoundError, DirectoryScanError
from crypto_recommender.domain.ports.price_file_reader_port import IPriceFileReader
from crypto_recommender.domain.ports.price_series_store_port import IPriceSeriesStore

logger = structlog.get_logger(__name__)


def extract_symbol_from_file_name(file_name: str) -> str:
    """Return the upper-cased text before the first underscore of *file_name*."""
    return file_name.split("_", 1)[0].upper()


class DirectoryScanService:
    FILE_SUFFIX: str = "_values.csv"

    def __init__(
        self,
        directory: str | Path,
        reader: IPriceFileReader,
        store: IPriceSeriesStore,
    ) -> None:
        self._directory = str(directory)
        self._reader = reader
        self._store = store

    @property
    def directory(self) -> str:
        return self._directory

    def scan(self) -> list[str]:
        """Run one scan cycle over the configured directory.

        Returns:
            Symbols newly loaded by this cycle, in file-name order.

        Raises:
            DirectoryScanError: wrapping the first fault (missing directory,
                                unreadable file, malformed data).
        """
        logger.info("scan_started", directory=self._directory)
        loaded: list[str] = []
        try:
            for path in self._candidate_files():
                symbol = extract_symbol_from_file_name(path.name)
                if not symbol:
                    logger.warning("file_without_symbol_skipped", file=path.name)
                    continue
                if self._store.contains(symbol):
                    continue
                records = self._reader.read_file(symbol, path)
                if self._store.put_if_absent(symbol, records):
                    loaded.append(symbol)
                    logger.info("symbol_loaded", symbol=symbol, records=len(records), file=path.name)
        except Exception as exc:
            logger.error(
                "scan_failed",
                directory=self._directory,
                loaded=loaded,
                error=str(exc),
            )
            raise DirectoryScanError(self._directory) from exc

        logger.info("scan_completed", directory=self._directory, loaded=loaded, total=len(self._store.symbols()))
        return loaded

    def _candidate_files(self) -> list[Path]:
        folder = Path(self._directory)
        if not folder.is_dir():
            raise DirectoryNotFoundError(self._directory)

        candidates = []
        for entry in sorted(folder.iterdir(), key=lambda p: p.name):
            if not entry.name.endswith(self.FILE_SUFFIX):
                continue
            if not entry.is_file():
                logger.warning("non_file_entry_skipped", entry=entry.name)
                continue
            candidates.append(entry)
        return candidates
