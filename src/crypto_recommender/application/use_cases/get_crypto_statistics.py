"""
Use-case: statistics (oldest/newest/min/max price, normalized range) for one symbol.
Depends only on application services and domain entities, no infrastructure imports.
"""

from crypto_recommender.application.services.statistics_engine import StatisticsEngine
from crypto_recommender.domain.entities.crypto_price import CryptoStatistics
from crypto_recommender.domain.exceptions import InvalidArgumentError


class GetCryptoStatisticsUseCase:
    def __init__(self, engine: StatisticsEngine) -> None:
        self._engine = engine

    def execute(self, symbol: str) -> CryptoStatistics:
        """Compute statistics for *symbol* (case-insensitive).

        Raises:
            InvalidArgumentError: if *symbol* is blank.
            SymbolNotFoundError:  if the symbol is unknown or has no valid records.
        """
        if not symbol or not symbol.strip():
            raise InvalidArgumentError("symbol must be a non-empty string")
        return self._engine.statistics_for(symbol.strip())
