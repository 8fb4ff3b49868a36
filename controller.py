"""Flag handling: one-shot configuration actions and the price printing pass."""

import logging
import sys
import time
from dataclasses import dataclass
from typing import Callable, NoReturn

from rich.console import Console

from config import SUPPORTED_PROVIDERS
from config_store import Configuration, ConfigSaveError, ConfigStore
from currencies import Currency, InvalidCurrency, format_currency_list, resolve
from data_fetcher import NetworkError, PercentageWindow, PriceClient

logger = logging.getLogger(__name__)

PERCENTAGE_WINDOWS = {
    "h": PercentageWindow.HOUR,
    "d": PercentageWindow.DAY,
    "": PercentageWindow.DAY,
    "w": PercentageWindow.WEEK,
}


@dataclass(frozen=True)
class Options:
    """Parsed command line intent, fixed for the lifetime of the process."""

    key: str | None = None
    decimal: bool = False
    save: str | None = None
    currency: str | None = None
    list_currencies: bool = False
    quantity: bool = False
    quantity_value: float | None = None
    my_quantity: bool = False
    autorefresh: bool = False
    autorefresh_value: float | None = None
    percentage: str | None = None
    reset: bool = False
    provider: str | None = None


@dataclass
class Session:
    """In-memory preferences shared by every pass of one process."""

    default_currency: Currency
    quantity: float
    autorefresh: float
    api_key: str
    provider: str

    @classmethod
    def from_configuration(cls, configuration: Configuration) -> "Session":
        return cls(
            default_currency=configuration.default_currency,
            quantity=configuration.quantity,
            autorefresh=configuration.autorefresh,
            api_key=configuration.api_key,
            provider=configuration.provider,
        )

    def to_configuration(self) -> Configuration:
        return Configuration(
            default_currency=self.default_currency,
            quantity=self.quantity,
            autorefresh=self.autorefresh,
            api_key=self.api_key,
            provider=self.provider,
        )


def exit_error(console: Console, message: str) -> NoReturn:
    """Print ``message`` as an error and terminate with exit code 1."""
    console.print(f"[bright_red]✖ {message}[/bright_red]")
    sys.exit(1)


def print_success(console: Console, message: str) -> None:
    console.print(f"[green]✔ {message}[/green]")


def format_quantity(quantity: float) -> str:
    return f"{quantity:g}"


def _resolve_currency(code: str, client: PriceClient, console: Console) -> Currency:
    try:
        return resolve(code, client.list_currencies())
    except InvalidCurrency as e:
        logger.debug("%s", e)
        console.print("[bright_red]✖ Please choose a valid currency code[/bright_red]")
        console.print("Type `btc-value --list` for a list of all valid currencies")
        sys.exit(1)


def _save(store: ConfigStore, configuration: Configuration, console: Console, failure: str) -> None:
    try:
        store.save(configuration)
    except ConfigSaveError as e:
        logger.debug("%s", e)
        exit_error(console, f"Something wrong happened, could not {failure}.")


def _fetch(console: Console, call: Callable, *args, **kwargs):
    """Run a provider call behind a spinner, exiting on any network failure."""
    try:
        with console.status("Fetching Bitcoin data..."):
            return call(*args, **kwargs)
    except NetworkError as e:
        logger.debug("%s", e)
        exit_error(console, "Please check your internet connection")


def print_percentage(console: Console, percentage: float) -> None:
    if percentage < 0:
        console.print(f"[bright_red]{percentage}%[/bright_red]")
    else:
        console.print(f"[green]{percentage}%[/green]")


def print_value(console: Console, currency: Currency, value: str) -> None:
    console.print(f"[yellow]{currency.symbol}[/yellow]{value}")


def list_currencies(client: PriceClient, console: Console) -> None:
    console.print(format_currency_list(client.list_currencies()))


def set_provider(provider: str, session: Session, store: ConfigStore, console: Console) -> None:
    if provider not in SUPPORTED_PROVIDERS:
        exit_error(console, "Please select a valid currency provider")

    session.provider = provider
    _save(store, session.to_configuration(), console, "save new currency provider")
    print_success(console, f"Set `{provider}` as currency provider")


def reset_configuration(store: ConfigStore, console: Console) -> None:
    try:
        configuration = store.reset()
    except ConfigSaveError as e:
        logger.debug("%s", e)
        exit_error(console, "Something wrong happened, could not reset default configuration.")

    default = configuration.default_currency
    print_success(console, f"Default configuration reset to: {default.name} ({default.symbol})")


def set_api_key(key: str, session: Session, store: ConfigStore, console: Console) -> None:
    session.api_key = key
    _save(store, session.to_configuration(), console, "save API key")
    print_success(console, "API key is set")


def check_all_flags(
    options: Options,
    session: Session,
    store: ConfigStore,
    client: PriceClient,
    console: Console,
) -> None:
    """One printing pass: save default, quantity, then percentage or price."""
    if options.save is not None:
        session.default_currency = _resolve_currency(options.save, client, console)
        _save(store, session.to_configuration(), console, "save new default currency")
        currency = session.default_currency
        print_success(console, f"Default currency set to: {currency.name} ({currency.symbol})")

    if options.my_quantity and options.quantity_value is not None:
        exit_error(console, "--quantity and --my-quantity cannot be combined")

    multiplier = 1
    if options.quantity or options.my_quantity:
        if options.quantity_value is not None and options.quantity_value != session.quantity:
            session.quantity = options.quantity_value
            _save(store, session.to_configuration(), console, "save new quantity")
            print_success(console, f"Quantity set to: {format_quantity(session.quantity)}")
        console.print(f"Value of {format_quantity(session.quantity)} BTC:")
        multiplier = session.quantity

    if options.percentage is not None:
        window = PERCENTAGE_WINDOWS.get(options.percentage)
        if window is None:
            exit_error(console, "Invalid percentage input. Check `btc-value --help`.")
        print_percentage(console, _fetch(console, client.get_percentage_change, window))
    elif options.currency:
        currency = _resolve_currency(options.currency, client, console)
        value = _fetch(console, client.get_price, currency.code, multiplier, options.decimal)
        print_value(console, currency, value)
    else:
        currency = session.default_currency
        value = _fetch(console, client.get_price, currency.code, multiplier, options.decimal)
        print_value(console, currency, value)


def run(
    options: Options,
    session: Session,
    store: ConfigStore,
    client: PriceClient,
    console: Console,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Handle one-shot actions, then print until done (or forever with autorefresh)."""
    if options.list_currencies:
        list_currencies(client, console)
        return

    if options.provider:
        set_provider(options.provider, session, store, console)
        return

    if options.reset:
        reset_configuration(store, console)
        return

    if options.key:
        set_api_key(options.key, session, store, console)
        return

    if session.provider == "cmc":
        if not session.api_key:
            exit_error(
                console,
                "You need to provide an API key to use CMC as a provider for the CLI. "
                "Set CoinGecko as a provider using `btc-value --provider coingecko`.\n"
                "Or go to https://coinmarketcap.com/api/ for obtaining a key.",
            )
        client.set_api_key(session.api_key)
    client.set_provider(session.provider)

    # A new interval only lives as long as this process, so it stays out of the session
    interval = session.autorefresh
    if options.autorefresh_value is not None:
        interval = options.autorefresh_value

    while True:
        check_all_flags(options, session, store, client, console)
        if not options.autorefresh:
            return
        logger.debug("Refreshing in %s seconds", interval)
        sleep(interval)
