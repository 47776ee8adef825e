"""Custom exceptions."""


class MarketsDashError(Exception):
    """Base class for errors surfaced on the dashboard."""


class ConfigError(MarketsDashError):
    """Raised when the credential or watch lists are missing or malformed."""


class DataRetrievalError(MarketsDashError):
    """Raised when a provider fails to return usable data."""


class NetworkError(DataRetrievalError):
    """Raised on a transport failure or a non-success HTTP status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DataError(DataRetrievalError):
    """Raised when a payload holds no usable price history."""


def describe_error(err: BaseException) -> str:
    """Human-readable text for an error shown on a card or status line."""
    message = str(err).strip()
    return message or type(err).__name__
