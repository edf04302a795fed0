"""
Use-case: the symbol with the highest normalized range on a given calendar day.
Depends only on application services and domain entities, no infrastructure imports.
"""

import re
from datetime import date, datetime
from typing import Union

from crypto_recommender.application.services.statistics_engine import StatisticsEngine
from crypto_recommender.domain.exceptions import InvalidArgumentError


_ISO_DAY = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_day(value: Union[date, str]) -> date:
    """Accept a date or a calendar ``YYYY-MM-DD`` string (no week or basic forms)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        text = value.strip()
        if not _ISO_DAY.fullmatch(text):
            raise ValueError("not in YYYY-MM-DD form")
        return datetime.strptime(text, "%Y-%m-%d").date()
    except (AttributeError, ValueError) as exc:
        raise InvalidArgumentError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


class GetHighestNormalizedCryptoUseCase:
    def __init__(self, engine: StatisticsEngine) -> None:
        self._engine = engine

    def execute(self, day: Union[date, str]) -> str:
        """
        Raises:
            InvalidArgumentError: if *day* is not a date or ISO date string.
            NoDataForDateError:   if no symbol has two or more records that day.
        """
        return self._engine.highest_normalized_for(parse_day(day))
