"""
Domain error taxonomy.

Application services raise these; the HTTP boundary maps each class to a
status code and the scan runner logs and retries scan faults.
"""

from datetime import date


class CryptoRecommendationError(Exception):
    """Base class for all errors raised by the recommendation core."""


class DirectoryNotFoundError(CryptoRecommendationError):
    def __init__(self, directory: str) -> None:
        self.directory = directory
        super().__init__(
            f"Crypto directory does not exist or is not a directory: {directory}"
        )


class DirectoryScanError(CryptoRecommendationError):
    """A scan cycle failed. The underlying fault is chained as ``__cause__``."""

    def __init__(self, directory: str) -> None:
        self.directory = directory
        super().__init__(f"Failed to scan crypto directory: {directory}")


class DataProcessingError(CryptoRecommendationError):
    def __init__(self, symbol: str, detail: str = "") -> None:
        self.symbol = symbol
        message = f"Error processing crypto data for symbol: {symbol}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class SymbolNotFoundError(CryptoRecommendationError):
    """Raised when a symbol is unknown, empty, or holds no valid records.

    ``reason`` is ``"unavailable"`` for a missing/empty entry and
    ``"no_valid_data"`` when every record was filtered out.
    """

    UNAVAILABLE = "unavailable"
    NO_VALID_DATA = "no_valid_data"

    def __init__(self, symbol: str, reason: str = UNAVAILABLE) -> None:
        self.symbol = symbol
        self.reason = reason
        if reason == self.NO_VALID_DATA:
            message = f"No valid data available for crypto: {symbol}"
        else:
            message = f"Unsupported or unavailable crypto: {symbol}"
        super().__init__(message)


class NoDataForDateError(CryptoRecommendationError):
    def __init__(self, day: date) -> None:
        self.day = day
        super().__init__("No data available for the given date")


class InvalidArgumentError(CryptoRecommendationError, ValueError):
    """Malformed caller input (blank symbol, unparsable date)."""
