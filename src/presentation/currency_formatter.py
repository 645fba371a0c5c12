# src/presentation/currency_formatter.py
"""Formats USD-denominated amounts in the display currency."""
from src.config.settings import AppSettings

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "PKR": "Rs",
    "AUD": "A$",
    "CAD": "CA$",
    "CHF": "CHF ",
    "AED": "AED ",
}


class CurrencyFormatter:
    """Converts USD amounts with the configured rate and formats them.

    Unknown currencies use a rate of 1 and their ISO code as prefix.
    """

    def __init__(self, settings: AppSettings, currency: str | None = None):
        self._currency = (currency or settings.display_currency).upper()
        self._rate = settings.currency_rates.get(self._currency, 1.0)

    @property
    def currency(self) -> str:
        return self._currency

    def convert(self, amount_usd: float) -> float:
        return amount_usd * self._rate

    def format(self, amount_usd: float) -> str:
        """Format an amount, e.g. -1234.5 -> "-$1,234.50"."""
        amount = round(self.convert(amount_usd), 2)
        symbol = CURRENCY_SYMBOLS.get(self._currency, f"{self._currency} ")
        sign = "-" if amount < 0 else ""
        return f"{sign}{symbol}{abs(amount):,.2f}"
