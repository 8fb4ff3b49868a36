"""Configuration settings for btc-value."""

import os
from dotenv import load_dotenv

load_dotenv()

# CoinGecko API (free, no key required)
COINGECKO_BASE_URL = os.getenv("COINGECKO_BASE_URL", "https://api.coingecko.com/api/v3")

# CoinMarketCap API (key required, obtain at https://coinmarketcap.com/api/)
CMC_BASE_URL = os.getenv("CMC_BASE_URL", "https://pro-api.coinmarketcap.com/v1")

SUPPORTED_PROVIDERS = ("cmc", "coingecko")

# Seconds before an unanswered request is given up
REQUEST_TIMEOUT = float(os.getenv("BTC_VALUE_TIMEOUT", "30"))

LOG_LEVEL = os.getenv("BTC_VALUE_LOG_LEVEL", "WARNING").upper()

# Persisted preferences live next to the program unless overridden
CONFIG_FILE = os.getenv(
    "BTC_VALUE_CONFIG",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "config.json"),
)

DEFAULT_CONFIGURATION = {
    "default": {
        "name": "United States Dollar",
        "code": "USD",
        "symbol": "$",
    },
    "quantity": 1,
    "autorefresh": 15,
    "apiKey": "",
    "provider": "coingecko",
}
