"""Tests for PriceQueryService: ticker resolution, error mapping and the sticker roll."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from coinbot.domain.models.market import CoinInfo
from coinbot.exceptions import (
    ApiError,
    ApiTimeoutError,
    ApiUnavailable,
    ExternalServiceError,
    InvalidCurrencyError,
    NoResultsFound,
    UnsupportedAsset,
    UnsupportedCurrency,
)
from coinbot.infra.price.coingecko import CoinGeckoClient
from coinbot.infra.price.service import GENERIC_FAILURE_MESSAGE, PriceQueryService, should_send_sticker


@pytest.fixture()
def service(loaded_cache, mock_coingecko):
    return PriceQueryService(loaded_cache, mock_coingecko)


class TestLookupPrice:
    async def test_returns_first_snapshot(self, service, mock_coingecko, btc_snapshot):
        mock_coingecko.coins_markets.return_value = [btc_snapshot]

        snapshot = await service.lookup_price("BTC", "USD")
        assert snapshot == btc_snapshot
        mock_coingecko.coins_markets.assert_awaited_once_with("USD", ["bitcoin"])

    async def test_unknown_ticker(self, service, mock_coingecko):
        with pytest.raises(UnsupportedAsset, match="DOGE not supported"):
            await service.lookup_price("DOGE", "USD")
        mock_coingecko.coins_markets.assert_not_awaited()

    async def test_invalid_currency_maps_to_unsupported_currency(self, service, mock_coingecko):
        mock_coingecko.coins_markets.side_effect = InvalidCurrencyError("XYZ")

        with pytest.raises(UnsupportedCurrency) as e_info:
            await service.lookup_price("BTC", "XYZ")
        assert e_info.value.currency == "XYZ"
        assert str(e_info.value) == "XYZ not supported"

    async def test_timeout_maps_to_api_unavailable(self, service, mock_coingecko):
        mock_coingecko.coins_markets.side_effect = ApiTimeoutError("timed out")
        with pytest.raises(ApiUnavailable):
            await service.lookup_price("BTC", "USD")

    async def test_other_api_error_is_verbatim(self, service, mock_coingecko):
        mock_coingecko.coins_markets.side_effect = ExternalServiceError("You've exceeded the Rate Limit")

        with pytest.raises(ApiError) as e_info:
            await service.lookup_price("BTC", "USD")
        assert str(e_info.value) == "You've exceeded the Rate Limit"

    async def test_empty_result(self, service, mock_coingecko):
        mock_coingecko.coins_markets.return_value = []
        with pytest.raises(NoResultsFound, match="no results found"):
            await service.lookup_price("BTC", "USD")


class TestCoinInfo:
    async def test_resolves_and_fetches(self, service, mock_coingecko):
        info = CoinInfo(id="ethereum", symbol="eth", name="Ethereum", image_large="eth.png")
        mock_coingecko.coin.return_value = info

        assert await service.coin_info("eth") == info
        mock_coingecko.coin.assert_awaited_once_with("ethereum")

    async def test_unknown_ticker(self, service):
        with pytest.raises(UnsupportedAsset):
            await service.coin_info("nope")


class TestQueryMessage:
    async def test_renders_snapshot(self, service, mock_coingecko, btc_snapshot):
        mock_coingecko.coins_markets.return_value = [btc_snapshot]

        message = await service.query_message("BTC", "USD")
        assert message.startswith("Bitcoin ($BTC)\n")
        assert "Price: $43,250.50 (2.50% 🤑)" in message

    async def test_query_error_becomes_its_message(self, service):
        assert await service.query_message("NOPE", "USD") == "NOPE not supported"

    async def test_unsupported_currency_message(self, service, mock_coingecko):
        mock_coingecko.coins_markets.side_effect = InvalidCurrencyError("xyz")
        assert await service.query_message("BTC", "xyz") == "XYZ not supported"

    async def test_render_failure_is_generic(self, service, mock_coingecko, btc_snapshot, caplog):
        mock_coingecko.coins_markets.return_value = [btc_snapshot.model_copy(update={"ath_date": "not a date"})]

        assert await service.query_message("BTC", "USD") == GENERIC_FAILURE_MESSAGE
        assert "Cannot render coin info" in caplog.text


class TestStickerRoll:
    def test_divisible_by_fifteen(self):
        with patch("coinbot.infra.price.service.secrets.token_bytes", return_value=(15 * 7).to_bytes(8, "big")):
            assert should_send_sticker() is True

    def test_divisible_by_three_only(self):
        with patch("coinbot.infra.price.service.secrets.token_bytes", return_value=(9).to_bytes(8, "big")):
            assert should_send_sticker() is False

    def test_divisible_by_five_only(self):
        with patch("coinbot.infra.price.service.secrets.token_bytes", return_value=(10).to_bytes(8, "big")):
            assert should_send_sticker() is False

    def test_rng_failure_means_no_sticker(self):
        with patch("coinbot.infra.price.service.secrets.token_bytes", side_effect=OSError("no entropy")):
            assert should_send_sticker() is False

    def test_probability_converges_to_one_fifteenth(self):
        trials = 60_000
        hits = sum(should_send_sticker() for _ in range(trials))
        # std dev of the rate is ~0.001 at this sample size
        assert abs(hits / trials - 1 / 15) < 0.008


class TestUnexpectedProviderBodies:
    @pytest.fixture()
    def live_service(self, loaded_cache):
        http = AsyncMock()
        return PriceQueryService(loaded_cache, CoinGeckoClient(http_client=http)), http

    async def test_query_still_gets_a_reply(self, live_service):
        service, http = live_service
        resp = MagicMock()
        resp.status_code = 200
        resp.json.return_value = {"status": {"error_code": 0}}
        http.get.return_value = resp

        reply = await service.query_message("btc", "usd")
        assert "expected list" in reply

    async def test_coin_info_is_api_error(self, live_service):
        service, http = live_service
        resp = MagicMock()
        resp.status_code = 200
        resp.json.return_value = ["not", "a", "coin"]
        http.get.return_value = resp

        with pytest.raises(ApiError):
            await service.coin_info("btc")
