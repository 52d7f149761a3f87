from enum import Enum


class SymbolPolicy(str, Enum):
    """How a coin's ticker is rendered in the snapshot header.

    DOLLAR_TICKER is the bot's long-standing rendering: "$" + upper-cased ticker,
    whatever the quote currency. PLAIN renders the upper-cased ticker alone.
    """

    DOLLAR_TICKER = "DOLLAR_TICKER"
    PLAIN = "PLAIN"

    def render(self, symbol: str) -> str:
        if self is SymbolPolicy.DOLLAR_TICKER:
            return "$" + symbol.upper()
        return symbol.upper()
