"""Exception hierarchy for coinbot.

Two families live here. ``ExternalServiceError`` and its subclasses are raised
by the CoinGecko client and never reach a chat. ``QueryError`` subclasses are
raised by the services; ``str(err)`` is the copy sent back to the user.
"""

from typing import Any


class CoinBotError(Exception):
    """Base exception carrying an optional ``context`` dict for structured logging."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class ConfigError(CoinBotError):
    """Invalid or missing configuration. Fatal at startup."""


# -- Market-data collaborator errors --


class ExternalServiceError(CoinBotError):
    """CoinGecko returned an error payload or an unexpected response."""


class InvalidCurrencyError(ExternalServiceError):
    """CoinGecko rejected the ``vs_currency`` parameter."""

    def __init__(self, currency: str) -> None:
        super().__init__("invalid vs_currency", context={"currency": currency})
        self.currency = currency


class ApiTimeoutError(ExternalServiceError):
    """The request to CoinGecko timed out or the connection failed."""


# -- User-facing query errors --


class QueryError(CoinBotError):
    """A query could not be answered. The message is shown to the user."""


class UnsupportedAsset(QueryError):
    def __init__(self, ticker: str) -> None:
        super().__init__(f"{ticker} not supported", context={"ticker": ticker})
        self.ticker = ticker


class UnsupportedCurrency(QueryError):
    def __init__(self, currency: str) -> None:
        super().__init__(f"{currency.upper()} not supported", context={"currency": currency})
        self.currency = currency


class NoResultsFound(QueryError):
    def __init__(self) -> None:
        super().__init__("no results found")


class NoDataForYear(QueryError):
    def __init__(self, year: int) -> None:
        super().__init__(f"No data available for year {year}", context={"year": year})
        self.year = year


class ApiUnavailable(QueryError):
    def __init__(self) -> None:
        super().__init__("CoinGecko API connection failed 🤕")


class ApiError(QueryError):
    """Any other CoinGecko error, surfaced with the provider's own message."""


class MalformedInput(QueryError):
    """Amount, year, month or query tokens could not be parsed."""


class TemplateRenderFailure(QueryError):
    """A message could not be rendered. Logged; the user sees a generic reply."""
