"""CoinGecko API client: coin list, market snapshots, coin info and history."""

import logging
from datetime import date
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from coinbot.domain.models.market import CoinInfo, CoinListEntry, HistoricalQuote, MarketSnapshot
from coinbot.exceptions import ApiTimeoutError, ExternalServiceError, InvalidCurrencyError
from coinbot.infra.http.client import HttpClient

logger = logging.getLogger(__name__)

BASE_URL = "https://api.coingecko.com"

# CoinGecko reports an unknown vs_currency as {"error": "invalid vs_currency"}
INVALID_CURRENCY_ERROR = "invalid vs_currency"


def history_date(day: int, month: int, year: int) -> str:
    """Format a date the way /coins/{id}/history expects it (dd-mm-yyyy, unpadded)."""
    return f"{day}-{month}-{year}"


class CoinGeckoClient:
    """Thin typed wrapper over the public CoinGecko v3 API.

    Every failure surfaces as an ExternalServiceError subclass; the invalid currency
    payload becomes InvalidCurrencyError and timeouts become ApiTimeoutError.
    """

    def __init__(self, http_client: HttpClient, api_key: str = "", base_url: str = BASE_URL) -> None:
        self._http = http_client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def _get(self, path: str, params: dict[str, str] | None = None, currency: str = "") -> Any:
        params = dict(params or {})
        if self._api_key:
            params["x_cg_demo_api_key"] = self._api_key

        url = f"{self._base_url}/api/v3{path}"
        try:
            response = await self._http.get(url, params=params)
        except httpx.TimeoutException as e:
            raise ApiTimeoutError(f"CoinGecko request timed out: {path}", context={"path": path}) from e
        except httpx.TransportError as e:
            raise ApiTimeoutError(f"CoinGecko connection failed: {e}", context={"path": path}) from e

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                f"CoinGecko returned non-JSON response ({response.status_code})",
                context={"path": path, "status_code": response.status_code},
            ) from e

        if isinstance(data, dict) and data.get("error"):
            error = data["error"]
            if error == INVALID_CURRENCY_ERROR:
                raise InvalidCurrencyError(currency)
            raise ExternalServiceError(str(error), context={"path": path, "status_code": response.status_code})

        if response.status_code != 200:
            raise ExternalServiceError(
                f"CoinGecko returned {response.status_code}",
                context={"path": path, "status_code": response.status_code},
            )

        return data

    def _expect(self, data: Any, kind: type, path: str) -> Any:
        if not isinstance(data, kind):
            raise ExternalServiceError(
                f"CoinGecko {path} returned {type(data).__name__}, expected {kind.__name__}",
                context={"path": path},
            )
        return data

    def _parse(self, model: type[BaseModel], rows: list, path: str) -> list:
        try:
            return [model.model_validate(row) for row in rows]
        except ValidationError as e:
            raise ExternalServiceError(f"CoinGecko {path} returned unexpected data", context={"path": path}) from e

    async def coins_list(self) -> list[CoinListEntry]:
        """GET /coins/list: every coin CoinGecko knows about."""
        data = self._expect(await self._get("/coins/list"), list, "/coins/list")
        return self._parse(CoinListEntry, data, "/coins/list")

    async def coins_markets(self, vs_currency: str, ids: list[str]) -> list[MarketSnapshot]:
        """GET /coins/markets for the given coin ids, quoted in vs_currency."""
        params = {
            "vs_currency": vs_currency.lower(),
            "ids": ",".join(ids),
            "order": "market_cap_desc",
            "per_page": "250",
            "page": "1",
            "sparkline": "false",
            "price_change_percentage": "24h",
        }
        data = await self._get("/coins/markets", params=params, currency=vs_currency)
        return self._parse(MarketSnapshot, self._expect(data, list, "/coins/markets"), "/coins/markets")

    async def coin(self, coin_id: str) -> CoinInfo:
        """GET /coins/{id} without tickers, market data, community or developer data."""
        params = {
            "localization": "false",
            "tickers": "false",
            "market_data": "false",
            "community_data": "false",
            "developer_data": "false",
            "sparkline": "false",
        }
        path = f"/coins/{coin_id}"
        data = self._expect(await self._get(path, params=params), dict, path)
        image = data.get("image")
        row = {
            "id": data.get("id", coin_id),
            "symbol": data.get("symbol", ""),
            "name": data.get("name", ""),
            "image_large": (image.get("large") or "") if isinstance(image, dict) else "",
        }
        return self._parse(CoinInfo, [row], path)[0]

    async def coin_history(self, coin_id: str, day: date) -> HistoricalQuote:
        """GET /coins/{id}/history for a single calendar day."""
        date_str = history_date(day.day, day.month, day.year)
        params = {"date": date_str, "localization": "false"}
        path = f"/coins/{coin_id}/history"
        data = self._expect(await self._get(path, params=params), dict, path)
        logger.debug("CoinGecko history for %s on %s", coin_id, date_str)

        market_data = data.get("market_data")
        prices = None
        if isinstance(market_data, dict):
            current = market_data.get("current_price") or {}
            try:
                prices = {k.lower(): float(v) for k, v in current.items() if v is not None}
            except (AttributeError, TypeError, ValueError) as e:
                raise ExternalServiceError(f"CoinGecko {path} returned malformed prices", context={"path": path}) from e
        return HistoricalQuote(coin_id=coin_id, date=day, prices=prices)
