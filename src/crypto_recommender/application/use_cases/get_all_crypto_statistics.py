"""
Use-case: statistics for every loaded symbol, ranked by normalized range.
Depends only on application services and domain entities, no infrastructure imports.
"""

from crypto_recommender.application.services.statistics_engine import StatisticsEngine
from crypto_recommender.domain.entities.crypto_price import CryptoStatistics


class GetAllCryptoStatisticsUseCase:
    def __init__(self, engine: StatisticsEngine) -> None:
        self._engine = engine

    def execute(self) -> list[CryptoStatistics]:
        """Return statistics sorted descending by normalized range.

        Raises:
            SymbolNotFoundError: propagated from the first symbol without valid data.
        """
        return self._engine.all_statistics()
