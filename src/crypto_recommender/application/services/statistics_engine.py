"""
Application service: per-symbol statistics and cross-symbol rankings.

All computations read immutable series from the injected IPriceSeriesStore and
filter into private lists, so a concurrent scan can only make a new symbol
visible and never changes data under a running computation.

Business decisions owned here:
  - A zero price or a missing timestamp marks a record as invalid.
  - Rankings sort descending by normalized range; ties keep load order.
  - Best-of-day ties resolve to the lexically smallest symbol.
"""

import math
from datetime import date
from typing import Iterable

import structlog

from crypto_recommender.domain.entities.crypto_price import CryptoPrice, CryptoStatistics
from crypto_recommender.domain.exceptions import NoDataForDateError, SymbolNotFoundError
from crypto_recommender.domain.ports.price_series_store_port import IPriceSeriesStore

logger = structlog.get_logger(__name__)

INVALID_PRICE: float = 0.0
MIN_RECORDS_PER_DAY: int = 2


def normalized_range(min_price: float, max_price: float) -> float:
    """Return ``(max - min) / min``.

    A zero minimum is degenerate: the result is ``inf`` (or ``nan`` when the
    range itself is zero) rather than a ZeroDivisionError.
    """
    if min_price == 0:
        return math.nan if max_price == min_price else math.inf
    return (max_price - min_price) / min_price


def is_valid(record: CryptoPrice) -> bool:
    return record.timestamp is not None and record.price != INVALID_PRICE


def valid_records(records: Iterable[CryptoPrice]) -> list[CryptoPrice]:
    return [r for r in records if is_valid(r)]


class StatisticsEngine:
    def __init__(self, store: IPriceSeriesStore) -> None:
        self._store = store

    def statistics_for(self, symbol: str) -> CryptoStatistics:
        """Compute oldest/newest/min/max price and normalized range for *symbol*.

        Raises:
            SymbolNotFoundError: if the symbol is unknown or empty
                                 (reason "unavailable"), or if no record
                                 survives filtering (reason "no_valid_data").
        """
        key = symbol.upper()
        logger.debug("statistics_requested", symbol=key)
        series = self._store.get(key)
        if not series:
            logger.warning("symbol_not_found", symbol=key)
            raise SymbolNotFoundError(symbol)

        prices = valid_records(series)
        if not prices:
            logger.warning("symbol_without_valid_data", symbol=key)
            raise SymbolNotFoundError(symbol, SymbolNotFoundError.NO_VALID_DATA)

        prices.sort(key=lambda r: r.timestamp)
        values = [r.price for r in prices]
        min_price = min(values)
        max_price = max(values)

        stats = CryptoStatistics(
            symbol=key,
            oldest_price=prices[0].price,
            newest_price=prices[-1].price,
            min_price=min_price,
            max_price=max_price,
            normalized_range=normalized_range(min_price, max_price),
        )
        logger.info(
            "statistics_calculated",
            symbol=key,
            oldest_price=stats.oldest_price,
            newest_price=stats.newest_price,
            min_price=stats.min_price,
            max_price=stats.max_price,
            normalized_range=stats.normalized_range,
        )
        return stats

    def all_statistics(self) -> list[CryptoStatistics]:
        """Statistics for every loaded symbol, descending by normalized range.

        The first symbol that fails aborts the whole call.
        """
        stats = [self.statistics_for(symbol) for symbol in self._store.symbols()]
        stats.sort(key=lambda s: s.normalized_range, reverse=True)
        logger.info("all_statistics_calculated", count=len(stats))
        return stats

    def highest_normalized_for(self, day: date) -> str:
        """Return the symbol with the highest normalized range on *day*.

        Only symbols with at least two valid records on that calendar day
        (in the zone their timestamps were ingested in) take part.

        Raises:
            NoDataForDateError: if no symbol qualifies.
        """
        snapshot = self._store.snapshot()
        best_symbol = None
        best_range = -math.inf

        for symbol in sorted(snapshot):
            day_prices = [
                r.price for r in valid_records(snapshot[symbol]) if r.timestamp.date() == day
            ]
            if len(day_prices) < MIN_RECORDS_PER_DAY:
                continue
            day_range = normalized_range(min(day_prices), max(day_prices))
            if day_range > best_range:
                best_range = day_range
                best_symbol = symbol

        if best_symbol is None:
            logger.warning("no_data_for_date", date=day.isoformat())
            raise NoDataForDateError(day)

        logger.info("highest_normalized_found", date=day.isoformat(), symbol=best_symbol, normalized_range=best_range)
        return best_symbol
