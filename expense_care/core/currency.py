"""Currency display helpers.

Amounts are never converted; the currency code only picks a symbol.
"""

from expense_care.models.schemas import DEFAULT_CURRENCY, Currency

_SYMBOLS: dict[Currency, str] = {
    Currency.USD: "$",
    Currency.EUR: "€",
    Currency.GBP: "£",
    Currency.THB: "฿",
    Currency.JPY: "¥",
    Currency.AUD: "A$",
}


def _render(amount: float, currency: Currency | str, decimals: int) -> str:
    code = Currency(currency)
    sign = "-" if round(amount, decimals) < 0 else ""
    symbol = _SYMBOLS.get(code)
    if symbol is None:
        # Unsupported code: "<CODE> <amount>" without grouping, keeping the caller's code
        label = currency.strip().upper() if isinstance(currency, str) else code.value
        return f"{label} {sign}{abs(amount):.{decimals}f}"
    return f"{sign}{symbol}{abs(amount):,.{decimals}f}"


def format_currency(amount: float, currency: Currency | str = DEFAULT_CURRENCY) -> str:
    """Format *amount* with two decimals, e.g. ``$1,234.50`` or ``-€3.00``."""
    return _render(amount, currency, 2)


def format_currency_compact(
    amount: float, currency: Currency | str = DEFAULT_CURRENCY
) -> str:
    """Format *amount* rounded to whole units, e.g. ``$1,500``."""
    return _render(amount, currency, 0)
