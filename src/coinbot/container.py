from dependency_injector import containers, providers

from coinbot.config import load_settings
from coinbot.infra.http.client import HttpClient
from coinbot.infra.price.coingecko import CoinGeckoClient
from coinbot.infra.price.identifier_cache import IdentifierCache
from coinbot.infra.price.service import PriceQueryService
from coinbot.infra.price.whatif import WhatIfService


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(load_settings)

    http_client = providers.Singleton(
        HttpClient,
        timeout=settings.provided.http_timeout,
    )

    coingecko = providers.Singleton(
        CoinGeckoClient,
        http_client=http_client,
        api_key=settings.provided.coingecko_api_key,
        base_url=settings.provided.coingecko_base_url,
    )

    identifier_cache = providers.Singleton(
        IdentifierCache,
        coingecko=coingecko,
        interval=settings.provided.refresh_interval,
    )

    price_service = providers.Singleton(
        PriceQueryService,
        cache=identifier_cache,
        coingecko=coingecko,
    )

    what_if_service = providers.Singleton(
        WhatIfService,
        cache=identifier_cache,
        coingecko=coingecko,
        prices=price_service,
    )
