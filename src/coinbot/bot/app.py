"""Entry point: wires the container into a python-telegram-bot Application and polls."""

import logging
import sys

from dependency_injector import providers
from telegram import Update
from telegram.ext import Application, ApplicationBuilder, CommandHandler, InlineQueryHandler, MessageHandler, filters

from coinbot.bot.handlers import BotHandlers, on_error
from coinbot.config import load_settings
from coinbot.container import Container
from coinbot.exceptions import ConfigError

logger = logging.getLogger(__name__)

ALLOWED_UPDATES = [Update.MESSAGE, Update.INLINE_QUERY, Update.CHOSEN_INLINE_RESULT]
POLL_TIMEOUT = 10  # seconds, long polling


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def register_handlers(application: Application, handlers: BotHandlers) -> None:
    application.add_handler(CommandHandler("whatif", handlers.on_what_if))
    application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handlers.on_text))
    application.add_handler(InlineQueryHandler(handlers.on_inline_query))
    application.add_error_handler(on_error)


def build_application(container: Container) -> Application:
    settings = container.settings()
    cache = container.identifier_cache()

    async def post_init(application: Application) -> None:
        await cache.start()
        logger.info("Coin id cache started (%d symbols)", len(cache.snapshot()))

    async def post_shutdown(application: Application) -> None:
        await cache.stop()
        await container.http_client().close()

    application = (
        ApplicationBuilder()
        .token(settings.telegram_token)
        .concurrent_updates(True)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )
    handlers = BotHandlers(settings, container.price_service(), container.what_if_service())
    register_handlers(application, handlers)
    return application


def main() -> None:
    configure_logging()
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.critical("Cannot start: %s", e)
        sys.exit(1)
    logging.getLogger().setLevel(settings.log_level.upper())

    container = Container()
    container.settings.override(providers.Object(settings))

    application = build_application(container)
    logger.info("Starting long polling")
    application.run_polling(allowed_updates=ALLOWED_UPDATES, timeout=POLL_TIMEOUT)


if __name__ == "__main__":
    main()
