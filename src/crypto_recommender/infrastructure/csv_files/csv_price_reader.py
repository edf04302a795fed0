"""
Infrastructure adapter: `<SYMBOL>_values.csv` files -> IPriceFileReader.

File layout: one header line, then `<epoch_millis>,<ignored>,<price>` rows.
Timestamps are converted to aware datetimes in the ingestion zone; the same
zone must be used when grouping records by calendar day.
"""

import csv
import math
import re
from datetime import datetime, timedelta, timezone, tzinfo
from pathlib import Path
from typing import Optional, TextIO

from crypto_recommender.domain.entities.crypto_price import CryptoPrice
from crypto_recommender.domain.exceptions import DataProcessingError
from crypto_recommender.domain.ports.price_file_reader_port import IPriceFileReader

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Plain ASCII numerals only: no digit grouping, no nan/inf spellings.
_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class CsvPriceFileReader(IPriceFileReader):
    """Parses comma-separated price files with the standard csv module."""

    _TIMESTAMP_FIELD = 0
    _PRICE_FIELD = 2

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        """
        Args:
            tz: Ingestion time zone. None means the host's local zone.
        """
        self._tz = tz

    def read(self, symbol: str, stream: TextIO) -> list[CryptoPrice]:
        """Parse *stream*. Blank lines are tolerated only at the end of the file."""
        symbol = symbol.upper()
        reader = csv.reader(stream)
        next(reader, None)  # header

        prices: list[CryptoPrice] = []
        blank_line_no = None
        for line_no, row in enumerate(reader, start=2):
            if not row or all(not field.strip() for field in row):
                blank_line_no = blank_line_no or line_no
                continue
            if blank_line_no is not None:
                raise DataProcessingError(symbol, f"line {blank_line_no}: blank line")
            prices.append(self._parse_row(symbol, row, line_no))
        return prices

    def read_file(self, symbol: str, path: Path) -> list[CryptoPrice]:
        with open(path, newline="", encoding="utf-8") as fh:
            return self.read(symbol, fh)

    def to_datetime(self, epoch_millis: int) -> datetime:
        return (_EPOCH + timedelta(milliseconds=epoch_millis)).astimezone(self._tz)

    def _parse_row(self, symbol: str, row: list[str], line_no: int) -> CryptoPrice:
        if len(row) <= self._PRICE_FIELD:
            raise DataProcessingError(
                symbol, f"line {line_no}: expected 3 fields, got {len(row)}"
            )
        raw_timestamp = row[self._TIMESTAMP_FIELD].strip()
        raw_price = row[self._PRICE_FIELD].strip()
        if not _INTEGER.fullmatch(raw_timestamp):
            raise DataProcessingError(
                symbol, f"line {line_no}: malformed timestamp {raw_timestamp!r}"
            )
        if not _DECIMAL.fullmatch(raw_price):
            raise DataProcessingError(
                symbol, f"line {line_no}: malformed price {raw_price!r}"
            )
        epoch_millis = int(raw_timestamp)
        price = float(raw_price)
        if not math.isfinite(price):
            raise DataProcessingError(
                symbol, f"line {line_no}: non-finite price {raw_price!r}"
            )
        try:
            timestamp = self.to_datetime(epoch_millis)
        except (OverflowError, OSError) as exc:
            raise DataProcessingError(
                symbol, f"line {line_no}: timestamp out of range"
            ) from exc
        return CryptoPrice(timestamp=timestamp, symbol=symbol, price=price)
