"""Telegram update handlers: %TICKER text queries, inline queries and /whatif."""

import logging
import math

from telegram import InlineQueryResultArticle, InputTextMessageContent, Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from coinbot.config import Settings
from coinbot.exceptions import MalformedInput, QueryError
from coinbot.infra.price.service import PriceQueryService, should_send_sticker
from coinbot.infra.price.whatif import WhatIfService
from coinbot.report.message import format_what_if

logger = logging.getLogger(__name__)

WHAT_IF_USAGE = "Syntax: /whatif amount token year [month number]"


def parse_query(text: str, prefix: str, default_currency: str) -> tuple[str, str]:
    """Split '%BTC' or '%BTC EUR' into (ticker, currency), upper-cased."""
    fields = text.upper()[len(prefix):].split()
    if len(fields) == 1:
        return fields[0], default_currency
    if len(fields) == 2:
        return fields[0], fields[1]
    raise MalformedInput(f"expected 1 or 2 fields, got {len(fields)}")


def parse_what_if_args(args: list[str]) -> tuple[float, str, int, int]:
    """Parse '/whatif <amount> <ticker> <year> [<month>]' arguments.

    Month is 0 when omitted, which the what-if service reads as the current month.
    """
    if len(args) < 3:
        raise MalformedInput(WHAT_IF_USAGE)

    try:
        amount = float(args[0])
    except ValueError as e:
        raise MalformedInput("Malformed amount") from e
    if not math.isfinite(amount):
        raise MalformedInput("Malformed amount")

    ticker = args[1]

    try:
        year = int(args[2])
    except ValueError as e:
        raise MalformedInput("Malformed year") from e

    month = 0
    if len(args) >= 4:
        try:
            month = int(args[3])
        except ValueError as e:
            raise MalformedInput("Malformed month") from e

    return amount, ticker, year, month


class BotHandlers:
    def __init__(self, settings: Settings, prices: PriceQueryService, what_if: WhatIfService) -> None:
        self._settings = settings
        self._prices = prices
        self._what_if = what_if

    async def on_text(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if message is None or not message.text or not message.text.startswith(self._settings.query_prefix):
            return

        try:
            ticker, currency = parse_query(message.text, self._settings.query_prefix, self._settings.default_currency)
        except MalformedInput as e:
            logger.error("Cannot split query data %r: %s", message.text, e)
            return

        chat_id = message.chat_id
        reply = await self._prices.query_message(ticker, currency)
        await context.bot.send_message(chat_id=chat_id, text=reply)

        if should_send_sticker():
            await context.bot.send_sticker(chat_id=chat_id, sticker=self._settings.sticker_file_id)

    async def on_inline_query(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.inline_query
        if query is None:
            return
        fields = query.query.split()
        if not fields:
            return
        ticker = fields[0].strip()

        try:
            info = await self._prices.coin_info(ticker)
        except QueryError as e:
            logger.warning("Cannot query inline token infos for %s: %s", ticker, e)
            return

        text = await self._prices.query_message(ticker, self._settings.default_currency)
        result = InlineQueryResultArticle(
            id="0",
            title=f"{info.name} ({ticker}) informations",
            input_message_content=InputTextMessageContent(text),
            description=f"Get current price, market cap infos about {info.name}!",
            thumbnail_url=info.image_large or None,
        )

        try:
            await query.answer([result], cache_time=self._settings.inline_cache_time)
        except TelegramError:
            logger.exception("Cannot answer inline query for %s", ticker)

    async def on_what_if(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if message is None:
            return
        chat_id = message.chat_id

        try:
            amount, ticker, year, month = parse_what_if_args(list(context.args or []))
            result = await self._what_if.what_if(ticker, self._settings.default_currency, year, month, amount)
        except QueryError as e:
            await context.bot.send_message(chat_id=chat_id, text=str(e))
            return

        await context.bot.send_message(chat_id=chat_id, text=format_what_if(result))


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error("Unhandled error while processing update %s", update, exc_info=context.error)
