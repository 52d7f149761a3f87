from coinbot.domain.enums.sentiment import Sentiment
from coinbot.domain.enums.symbol_policy import SymbolPolicy

__all__ = [
    "Sentiment",
    "SymbolPolicy",
]
