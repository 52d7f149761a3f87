"""Domain types for CoinGecko market data and what-if results."""

from datetime import date

from pydantic import BaseModel, ConfigDict


class CoinListEntry(BaseModel):
    """One row of /coins/list."""

    model_config = ConfigDict(extra="ignore")

    id: str
    symbol: str
    name: str = ""


class MarketSnapshot(BaseModel):
    """Point-in-time quote for one coin in one currency (/coins/markets item)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    symbol: str
    name: str
    current_price: float | None = None
    high_24h: float | None = None
    low_24h: float | None = None
    price_change_24h: float | None = None
    price_change_percentage_24h: float | None = None
    market_cap: float | None = None
    market_cap_change_percentage_24h: float | None = None
    ath: float | None = None
    ath_date: str | None = None  # RFC 3339, e.g. 2021-11-10T14:24:11.849Z


class CoinInfo(BaseModel):
    """Subset of /coins/{id} used for inline query results."""

    id: str
    symbol: str
    name: str
    image_large: str = ""


class HistoricalQuote(BaseModel):
    """Price of one coin on one past day, keyed by lowercase currency code.

    ``prices`` is None when CoinGecko returned the coin without a market_data section.
    """

    coin_id: str
    date: date
    prices: dict[str, float] | None = None


class WhatIfResult(BaseModel):
    ticker: str
    currency: str
    year: int
    amount: float
    historical_price: float
    current_price: float
    units: float  # amount / historical_price
    current_value: float  # units * current_price
