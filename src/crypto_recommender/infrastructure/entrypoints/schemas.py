"""HTTP response models. JSON keys are camelCase to keep the public API contract."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from crypto_recommender.domain.entities.crypto_price import CryptoStatistics


class CryptoStatisticsResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    symbol: str
    oldest_price: float
    newest_price: float
    min_price: float
    max_price: float
    normalized_range: float

    @classmethod
    def from_entity(cls, stats: CryptoStatistics) -> "CryptoStatisticsResponse":
        return cls(
            symbol=stats.symbol,
            oldest_price=stats.oldest_price,
            newest_price=stats.newest_price,
            min_price=stats.min_price,
            max_price=stats.max_price,
            normalized_range=stats.normalized_range,
        )
