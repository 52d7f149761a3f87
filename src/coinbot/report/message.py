"""Chat message rendering for price snapshots and what-if results."""

from datetime import datetime

from coinbot.domain.enums import Sentiment, SymbolPolicy
from coinbot.domain.models.market import MarketSnapshot, WhatIfResult
from coinbot.exceptions import TemplateRenderFailure
from coinbot.report.money import money_format

COIN_INFO_TEMPLATE = """{name} ({symbol})

Price: {price} ({price_change_percent} {price_emoji})
Market cap: {market_cap}({market_cap_percent} {market_cap_emoji})
ATH: {ath} ({ath_date}) 🌝
Last 24H high: {high_24h}
Last 24H low: {low_24h}
"""

WHAT_IF_TEMPLATE = "{amount} worth of {ticker} in {year} (priced at {historical_price}) are now worth {current_value} 😱"


def format_ath_date(value: str | None) -> str:
    """Render an RFC 3339 timestamp as 'D Month YYYY', e.g. '10 November 2021'."""
    if not value:
        raise TemplateRenderFailure("missing ATH date")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise TemplateRenderFailure(f"cannot parse ATH date {value!r}") from e
    return f"{parsed.day} {parsed:%B} {parsed.year}"


def format_percent(value: float | None) -> str:
    return f"{value or 0.0:.2f}%"


def format_snapshot(
    snapshot: MarketSnapshot,
    currency: str,
    symbol_policy: SymbolPolicy = SymbolPolicy.DOLLAR_TICKER,
) -> str:
    """Render the multi-line coin info message.

    Both emojis follow the 24h price change amount, including the market cap line.
    """
    money = money_format(currency)
    # market cap line reuses the price change sentiment
    sentiment = Sentiment.of(snapshot.price_change_24h)
    try:
        return COIN_INFO_TEMPLATE.format(
            name=snapshot.name,
            symbol=symbol_policy.render(snapshot.symbol),
            price=money.format(snapshot.current_price),
            price_change_percent=format_percent(snapshot.price_change_percentage_24h),
            price_emoji=sentiment.value,
            market_cap=money.format(snapshot.market_cap),
            market_cap_percent=format_percent(snapshot.market_cap_change_percentage_24h),
            market_cap_emoji=sentiment.value,
            ath=money.format(snapshot.ath),
            ath_date=format_ath_date(snapshot.ath_date),
            high_24h=money.format(snapshot.high_24h),
            low_24h=money.format(snapshot.low_24h),
        )
    except (KeyError, IndexError, ValueError) as e:
        raise TemplateRenderFailure(f"cannot render coin info: {e}") from e


def format_what_if(result: WhatIfResult) -> str:
    money = money_format(result.currency)
    return WHAT_IF_TEMPLATE.format(
        amount=money.format(result.amount),
        ticker=result.ticker.upper(),
        year=result.year,
        historical_price=money.format(result.historical_price),
        current_value=money.format(result.current_value),
    )
