"""WhatIfService: value today of a hypothetical past purchase."""

import logging
from datetime import date
from typing import Callable

from coinbot.domain.models.market import WhatIfResult
from coinbot.exceptions import (
    ApiTimeoutError,
    ApiUnavailable,
    ExternalServiceError,
    NoDataForYear,
    UnsupportedAsset,
    UnsupportedCurrency,
)
from coinbot.infra.price.coingecko import CoinGeckoClient
from coinbot.infra.price.identifier_cache import IdentifierCache
from coinbot.infra.price.service import PriceQueryService

logger = logging.getLogger(__name__)

# History is always sampled mid-month
HISTORY_DAY = 15


class WhatIfService:
    def __init__(
        self,
        cache: IdentifierCache,
        coingecko: CoinGeckoClient,
        prices: PriceQueryService,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._cache = cache
        self._coingecko = coingecko
        self._prices = prices
        self._today = today

    async def what_if(self, ticker: str, currency: str, year: int, month: int, amount: float) -> WhatIfResult:
        """Buy ``amount`` of ``currency`` worth of ``ticker`` on the 15th of month/year; what is it worth now?

        A month outside 1-12 means the current calendar month.
        """
        currency = currency.lower()

        coin_id = await self._cache.lookup(ticker)
        if coin_id is None:
            raise UnsupportedAsset(ticker)

        if month < 1 or month > 12:
            month = self._today().month

        try:
            day = date(year, month, HISTORY_DAY)
        except ValueError as e:
            raise NoDataForYear(year) from e

        try:
            history = await self._coingecko.coin_history(coin_id, day)
        except ApiTimeoutError as e:
            logger.warning("Cannot query history data for %s on %s: %s", coin_id, day, e)
            raise ApiUnavailable() from e
        except ExternalServiceError as e:
            logger.warning("Cannot query history data for %s on %s: %s", coin_id, day, e)
            raise UnsupportedAsset(ticker) from e

        if history.prices is None:
            raise NoDataForYear(year)

        historical_price = history.prices.get(currency)
        if historical_price is None:
            raise UnsupportedCurrency(currency)
        if historical_price <= 0:
            raise NoDataForYear(year)

        snapshot = await self._prices.lookup_price(ticker, currency)
        current_price = snapshot.current_price or 0.0

        units = amount / historical_price
        return WhatIfResult(
            ticker=ticker,
            currency=currency,
            year=year,
            amount=amount,
            historical_price=historical_price,
            current_price=current_price,
            units=units,
            current_value=units * current_price,
        )
