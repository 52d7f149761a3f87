"""IdentifierCache: self-refreshing ticker symbol → CoinGecko id map."""

import asyncio
import logging

from coinbot.exceptions import ExternalServiceError
from coinbot.infra.price.coingecko import CoinGeckoClient

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL = 1.0


class IdentifierCache:
    """Maps lowercase ticker symbols to CoinGecko coin ids.

    The map is empty until the first successful refresh. Each refresh builds a new
    dict and swaps the reference under the lock, so a lookup sees either the old
    map or the new one, never a mix. A single lock serializes lookups and swaps.
    """

    def __init__(self, coingecko: CoinGeckoClient, interval: float = DEFAULT_REFRESH_INTERVAL) -> None:
        self._coingecko = coingecko
        self._interval = interval
        self._ids: dict[str, str] = {}
        self._lock = asyncio.Lock()
        self._task: asyncio.Task | None = None

    async def refresh(self) -> None:
        """Reload the coin list. On failure the current map is kept and the error re-raised."""
        try:
            coins = await self._coingecko.coins_list()
        except ExternalServiceError:
            logger.warning("Coin id refresh failed, keeping %d cached ids", len(self._ids))
            raise

        ids: dict[str, str] = {}
        for coin in coins:
            # Duplicate symbols: the last entry in CoinGecko's list wins
            ids[coin.symbol.lower()] = coin.id

        async with self._lock:
            self._ids = ids
        logger.debug("Coin id map refreshed with %d symbols", len(ids))

    async def lookup(self, symbol: str) -> str | None:
        async with self._lock:
            return self._ids.get(symbol.lower())

    def snapshot(self) -> dict[str, str]:
        """Copy of the current map."""
        return dict(self._ids)

    async def _refresh_logged(self) -> None:
        try:
            await self.refresh()
        except ExternalServiceError as e:
            logger.error("Background id update error: %s", e)
        except Exception:
            logger.exception("Background id update failed unexpectedly")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self._refresh_logged()

    async def start(self) -> None:
        """Refresh once, then keep refreshing every ``interval`` seconds in the background."""
        if self._task is not None:
            return
        await self._refresh_logged()
        self._task = asyncio.create_task(self._run(), name="identifier-cache-refresh")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
