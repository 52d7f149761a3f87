from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from coinbot.exceptions import ConfigError

TOKEN_ENV = "CSB_TOKEN"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    telegram_token: str = Field(default="", validation_alias=TOKEN_ENV)
    coingecko_base_url: str = "https://api.coingecko.com"
    coingecko_api_key: str = ""
    http_timeout: float = 10.0  # seconds, applies to every CoinGecko call
    refresh_interval: float = 1.0  # seconds between coin list refreshes
    default_currency: str = "USD"
    query_prefix: str = "%"
    sticker_file_id: str = "CAACAgQAAxkBAAEI-mpgKkXH3BZf3aD5e5Nltp9GmAfbKgACIQADFqBBJiaiOzMAAViZ0R4E"
    inline_cache_time: int = 60
    log_level: str = "INFO"


def load_settings(**overrides) -> Settings:
    """Build Settings and enforce that the bot token is present."""
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        raise ConfigError(str(e), context={"source": "load_settings"}) from e
    if not settings.telegram_token:
        raise ConfigError(
            f"missing telegram bot token in {TOKEN_ENV} env var",
            context={"field": TOKEN_ENV},
        )
    return settings
