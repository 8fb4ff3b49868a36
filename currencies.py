"""Supported currencies and currency code lookup."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Currency:
    code: str
    name: str
    symbol: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "code": self.code, "symbol": self.symbol}


class InvalidCurrency(ValueError):
    """Raised when a currency code is not in the supported list."""

    def __init__(self, code: str):
        super().__init__(f"Unsupported currency code: {code!r}")
        self.code = code


# Fiat currencies both price providers can convert Bitcoin into
CURRENCIES: tuple[Currency, ...] = (
    Currency("USD", "United States Dollar", "$"),
    Currency("AUD", "Australian Dollar", "$"),
    Currency("BRL", "Brazilian Real", "R$"),
    Currency("CAD", "Canadian Dollar", "$"),
    Currency("CHF", "Swiss Franc", "Fr."),
    Currency("CLP", "Chilean Peso", "$"),
    Currency("CNY", "Chinese Yuan", "¥"),
    Currency("CZK", "Czech Koruna", "Kč"),
    Currency("DKK", "Danish Krone", "kr"),
    Currency("EUR", "Euro", "€"),
    Currency("GBP", "Pound Sterling", "£"),
    Currency("HKD", "Hong Kong Dollar", "$"),
    Currency("HUF", "Hungarian Forint", "Ft"),
    Currency("IDR", "Indonesian Rupiah", "Rp"),
    Currency("ILS", "Israeli New Shekel", "₪"),
    Currency("INR", "Indian Rupee", "₹"),
    Currency("JPY", "Japanese Yen", "¥"),
    Currency("KRW", "South Korean Won", "₩"),
    Currency("MXN", "Mexican Peso", "$"),
    Currency("MYR", "Malaysian Ringgit", "RM"),
    Currency("NOK", "Norwegian Krone", "kr"),
    Currency("NZD", "New Zealand Dollar", "$"),
    Currency("PHP", "Philippine Peso", "₱"),
    Currency("PKR", "Pakistani Rupee", "₨"),
    Currency("PLN", "Polish Złoty", "zł"),
    Currency("RUB", "Russian Ruble", "₽"),
    Currency("SEK", "Swedish Krona", "kr"),
    Currency("SGD", "Singapore Dollar", "$"),
    Currency("THB", "Thai Baht", "฿"),
    Currency("TRY", "Turkish Lira", "₺"),
    Currency("TWD", "New Taiwan Dollar", "NT$"),
    Currency("ZAR", "South African Rand", "R"),
)


def resolve(code: str, currencies=CURRENCIES) -> Currency:
    """Find the supported currency matching ``code``, ignoring case.

    Raises:
        InvalidCurrency: if no supported currency has that code.
    """
    wanted = code.strip().upper()
    for currency in currencies:
        if currency.code == wanted:
            return currency
    raise InvalidCurrency(code)


def format_currency_list(currencies=CURRENCIES, per_line: int = 9) -> str:
    """Render the supported codes for the terminal, ``per_line`` codes per row."""
    codes = [currency.code for currency in currencies]
    rows = [", ".join(codes[i:i + per_line]) for i in range(0, len(codes), per_line)]

    output = "  List of all supported currency codes:"
    if rows:
        # Rows keep the comma so the list reads as one sequence
        output += "\n" + ",\n".join(f"      {row}" for row in rows)
    return output
