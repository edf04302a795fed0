"""
Domain entities for crypto price data.
Zero external dependencies, pure Python dataclasses only.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CryptoPrice:
    timestamp: Optional[datetime]
    symbol: str
    price: float


@dataclass(frozen=True)
class CryptoStatistics:
    symbol: str
    oldest_price: float
    newest_price: float
    min_price: float
    max_price: float
    normalized_range: float
