"""PriceQueryService: resolves tickers and turns CoinGecko quotes into chat replies."""

import logging
import secrets

from coinbot.domain.enums import SymbolPolicy
from coinbot.domain.models.market import CoinInfo, MarketSnapshot
from coinbot.exceptions import (
    ApiError,
    ApiTimeoutError,
    ApiUnavailable,
    ExternalServiceError,
    InvalidCurrencyError,
    NoResultsFound,
    QueryError,
    TemplateRenderFailure,
    UnsupportedAsset,
    UnsupportedCurrency,
)
from coinbot.infra.price.coingecko import CoinGeckoClient
from coinbot.infra.price.identifier_cache import IdentifierCache
from coinbot.report.message import format_snapshot

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Cannot query CoinGecko API"

# A 64-bit draw divisible by both 3 and 5 (i.e. by 15): p = 1/15
STICKER_DIVISOR = 15


def should_send_sticker() -> bool:
    """Roll the decorative sticker. False if the OS random source is unavailable."""
    try:
        value = int.from_bytes(secrets.token_bytes(8), "big")
    except OSError:
        return False
    return value % STICKER_DIVISOR == 0


class PriceQueryService:
    """Answers "%TICKER [CURRENCY]" style price queries."""

    def __init__(
        self,
        cache: IdentifierCache,
        coingecko: CoinGeckoClient,
        symbol_policy: SymbolPolicy = SymbolPolicy.DOLLAR_TICKER,
    ) -> None:
        self._cache = cache
        self._coingecko = coingecko
        self._symbol_policy = symbol_policy

    async def _resolve(self, ticker: str) -> str:
        coin_id = await self._cache.lookup(ticker)
        if coin_id is None:
            raise UnsupportedAsset(ticker)
        return coin_id

    async def lookup_price(self, ticker: str, currency: str) -> MarketSnapshot:
        """Current market snapshot for ticker quoted in currency."""
        coin_id = await self._resolve(ticker)

        try:
            snapshots = await self._coingecko.coins_markets(currency, [coin_id])
        except InvalidCurrencyError as e:
            raise UnsupportedCurrency(currency) from e
        except ApiTimeoutError as e:
            logger.warning("CoinGecko unavailable for %s/%s: %s", ticker, currency, e)
            raise ApiUnavailable() from e
        except ExternalServiceError as e:
            raise ApiError(str(e), context=e.context) from e

        if not snapshots:
            raise NoResultsFound()
        return snapshots[0]

    async def coin_info(self, ticker: str) -> CoinInfo:
        coin_id = await self._resolve(ticker)
        try:
            return await self._coingecko.coin(coin_id)
        except ApiTimeoutError as e:
            raise ApiUnavailable() from e
        except ExternalServiceError as e:
            raise ApiError(str(e), context=e.context) from e

    async def query_message(self, ticker: str, currency: str) -> str:
        """Rendered coin info, or the user-facing error text when the query fails."""
        try:
            snapshot = await self.lookup_price(ticker, currency)
            return format_snapshot(snapshot, currency, self._symbol_policy)
        except TemplateRenderFailure as e:
            logger.error("Cannot render coin info for %s/%s: %s", ticker, currency, e)
            return GENERIC_FAILURE_MESSAGE
        except QueryError as e:
            return str(e)
