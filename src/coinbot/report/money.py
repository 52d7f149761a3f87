"""Currency-aware money formatting for chat messages."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MoneyFormat:
    symbol: str
    thousand: str = ","
    decimal: str = "."
    precision: int = 2

    def format(self, value: float | None) -> str:
        amount = value or 0.0
        digits = f"{abs(amount):,.{self.precision}f}"
        digits = digits.translate(str.maketrans({",": self.thousand, ".": self.decimal}))
        sign = "-" if round(amount, self.precision) < 0 else ""
        return f"{sign}{self.symbol}{digits}"


# ISO code → display convention for the vs_currencies CoinGecko quotes most often
MONEY_FORMATS: dict[str, MoneyFormat] = {
    "USD": MoneyFormat("$"),
    "EUR": MoneyFormat("€", ".", ","),
    "GBP": MoneyFormat("£"),
    "JPY": MoneyFormat("¥"),
    "CNY": MoneyFormat("¥"),
    "KRW": MoneyFormat("₩"),
    "INR": MoneyFormat("₹"),
    "RUB": MoneyFormat("₽", " ", ","),
    "UAH": MoneyFormat("₴", " ", ","),
    "CHF": MoneyFormat("CHF ", "'", "."),
    "CAD": MoneyFormat("CA$"),
    "AUD": MoneyFormat("A$"),
    "NZD": MoneyFormat("NZ$"),
    "HKD": MoneyFormat("HK$"),
    "SGD": MoneyFormat("S$"),
    "MXN": MoneyFormat("MX$"),
    "BRL": MoneyFormat("R$", ".", ","),
    "ARS": MoneyFormat("AR$", ".", ","),
    "TRY": MoneyFormat("₺", ".", ","),
    "PLN": MoneyFormat("zł ", " ", ","),
    "CZK": MoneyFormat("Kč ", " ", ","),
    "HUF": MoneyFormat("Ft ", " ", ","),
    "SEK": MoneyFormat("kr ", " ", ","),
    "NOK": MoneyFormat("kr ", " ", ","),
    "DKK": MoneyFormat("kr ", ".", ","),
    "ZAR": MoneyFormat("R ", " ", ","),
    "IDR": MoneyFormat("Rp ", ".", ","),
    "VND": MoneyFormat("₫", ".", ","),
    "THB": MoneyFormat("฿"),
    "PHP": MoneyFormat("₱"),
    "ILS": MoneyFormat("₪"),
    "BTC": MoneyFormat("₿", precision=8),
    "ETH": MoneyFormat("Ξ", precision=6),
}


def money_format(currency: str) -> MoneyFormat:
    """Format for an ISO currency code; unknown codes render as '<CODE> 1,234.56'."""
    code = currency.upper()
    return MONEY_FORMATS.get(code) or MoneyFormat(f"{code} ")
