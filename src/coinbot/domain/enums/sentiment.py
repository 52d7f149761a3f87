from enum import Enum


class Sentiment(str, Enum):
    """Emoji shown next to a 24h change."""

    UP = "🤑"
    DOWN = "🤮"

    @classmethod
    def of(cls, change: float | None) -> "Sentiment":
        return cls.UP if (change or 0) > 0 else cls.DOWN
