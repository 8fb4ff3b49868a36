#!/usr/bin/env python3
"""btc-value - CLI Entry Point."""

import argparse
import logging
import math
import sys

from rich.console import Console
from rich.logging import RichHandler

from config import CONFIG_FILE, LOG_LEVEL, SUPPORTED_PROVIDERS
from config_store import ConfigStore
from controller import Options, Session, run
from data_fetcher import PriceClient

__version__ = "1.0.0"

console = Console(highlight=False)


def setup_logging(verbose: bool = False) -> None:
    """Send diagnostics to stderr so they never mix with printed values."""
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def positive_number(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number")
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"{value!r} is not a finite number")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value!r} must be greater than zero")
    return int(number) if number.is_integer() else number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="btc-value",
        description="Get the current Bitcoin value",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  btc-value                       $16258
  btc-value -k <example-API-key>  ✔ API key is set
  btc-value -d                    $16258.2
  btc-value -s NOK                ✔ Default currency set to: Norwegian Krone (kr)
  btc-value -c NOK                kr129640
  btc-value -q 2.2                Value of 2.2 BTC: $35768
  btc-value -p h                  -0.08%
  btc-value --provider coingecko  ✔ Set `coingecko` as currency provider
        """
    )

    parser.add_argument(
        "-k", "--key",
        help="Set the API key (obtain a key at https://coinmarketcap.com/api/)"
    )
    parser.add_argument(
        "-d", "--decimal",
        action="store_true",
        help="Print value as decimal"
    )
    parser.add_argument(
        "-s", "--save",
        metavar="CODE",
        help="Set the currency that will be used by default"
    )
    parser.add_argument(
        "-c", "--currency",
        metavar="CODE",
        help="Print the value in another currency"
    )
    parser.add_argument(
        "-l", "--list",
        dest="list_currencies",
        action="store_true",
        help="Print a list of all supported currencies"
    )
    parser.add_argument(
        "-q", "--quantity",
        nargs="?",
        const=True,
        type=positive_number,
        metavar="NUMBER",
        help="Print the value of the given quantity (saved for later use)"
    )
    parser.add_argument(
        "-m", "--my-quantity",
        action="store_true",
        help="Print the value of the saved quantity"
    )
    parser.add_argument(
        "-a", "--autorefresh",
        nargs="?",
        const=True,
        type=positive_number,
        metavar="SECONDS",
        help="Automatically refresh printing every SECONDS seconds"
    )
    parser.add_argument(
        "-p", "--percentage",
        nargs="?",
        const="",
        metavar="h|d|w",
        help="Print the percentage change (h = hour, d = day, w = week)"
    )
    parser.add_argument(
        "-r", "--reset",
        action="store_true",
        help="Reset the configuration to the default"
    )
    parser.add_argument(
        "--provider",
        metavar="|".join(SUPPORTED_PROVIDERS),
        help="Set the currency provider to retrieve Bitcoin values from"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log diagnostics to stderr"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def parse_options(argv=None) -> tuple[Options, bool]:
    """Parse ``argv`` into Options plus the verbose switch."""
    args = build_parser().parse_args(argv)

    options = Options(
        key=args.key,
        decimal=args.decimal,
        save=args.save,
        currency=args.currency,
        list_currencies=args.list_currencies,
        quantity=args.quantity is not None,
        quantity_value=None if args.quantity is True else args.quantity,
        my_quantity=args.my_quantity,
        autorefresh=args.autorefresh is not None,
        autorefresh_value=None if args.autorefresh is True else args.autorefresh,
        percentage=args.percentage,
        reset=args.reset,
        provider=args.provider,
    )
    return options, args.verbose


def main(argv=None):
    options, verbose = parse_options(argv)
    setup_logging(verbose)

    store = ConfigStore(CONFIG_FILE)
    session = Session.from_configuration(store.load())
    client = PriceClient()

    try:
        run(options, session, store, client, console)
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped.[/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()
