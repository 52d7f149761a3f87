from unittest.mock import AsyncMock, MagicMock

import pytest

from coinbot.config import Settings
from coinbot.domain.models.market import CoinListEntry, MarketSnapshot
from coinbot.infra.price.identifier_cache import IdentifierCache


@pytest.fixture()
def settings(monkeypatch) -> Settings:
    monkeypatch.setenv("CSB_TOKEN", "123456:TEST-TOKEN")
    return Settings()


@pytest.fixture()
def coin_list() -> list[CoinListEntry]:
    return [
        CoinListEntry(id="bitcoin", symbol="btc", name="Bitcoin"),
        CoinListEntry(id="ethereum", symbol="eth", name="Ethereum"),
        CoinListEntry(id="tether", symbol="usdt", name="Tether"),
    ]


@pytest.fixture()
def btc_snapshot() -> MarketSnapshot:
    return MarketSnapshot(
        id="bitcoin",
        symbol="btc",
        name="Bitcoin",
        current_price=43250.5,
        high_24h=44000.0,
        low_24h=42000.5,
        price_change_24h=1050.0,
        price_change_percentage_24h=2.5,
        market_cap=846_000_000_000.0,
        market_cap_change_percentage_24h=-1.25,
        ath=69045.0,
        ath_date="2021-11-10T14:24:11.849Z",
    )


@pytest.fixture()
def mock_coingecko(coin_list):
    coingecko = MagicMock()
    coingecko.coins_list = AsyncMock(return_value=coin_list)
    coingecko.coins_markets = AsyncMock(return_value=[])
    coingecko.coin = AsyncMock()
    coingecko.coin_history = AsyncMock()
    return coingecko


@pytest.fixture()
async def loaded_cache(mock_coingecko) -> IdentifierCache:
    cache = IdentifierCache(mock_coingecko, interval=0.01)
    await cache.refresh()
    yield cache
    await cache.stop()
