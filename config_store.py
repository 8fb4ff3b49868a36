"""Persisted user preferences (default currency, quantity, refresh interval, API key, provider)."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from typing import Any

from config import CONFIG_FILE, DEFAULT_CONFIGURATION, SUPPORTED_PROVIDERS
from currencies import Currency

logger = logging.getLogger(__name__)


def _default_currency() -> Currency:
    default = DEFAULT_CONFIGURATION["default"]
    return Currency(code=default["code"], name=default["name"], symbol=default["symbol"])


@dataclass
class Configuration:
    """The five preferences written to the config file."""

    default_currency: Currency = field(default_factory=_default_currency)
    quantity: float = DEFAULT_CONFIGURATION["quantity"]
    autorefresh: float = DEFAULT_CONFIGURATION["autorefresh"]
    api_key: str = DEFAULT_CONFIGURATION["apiKey"]
    provider: str = DEFAULT_CONFIGURATION["provider"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "default": self.default_currency.to_dict(),
            "quantity": self.quantity,
            "autorefresh": self.autorefresh,
            "apiKey": self.api_key,
            "provider": self.provider,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Configuration":
        """Build a configuration, keeping the default for any missing or malformed field."""
        config = cls()

        default = data.get("default")
        if isinstance(default, dict) and all(
            isinstance(default.get(key), str) and default.get(key) for key in ("code", "name", "symbol")
        ):
            config.default_currency = Currency(
                code=default["code"].upper(),
                name=default["name"],
                symbol=default["symbol"],
            )

        if _is_positive_number(data.get("quantity")):
            config.quantity = data["quantity"]
        if _is_positive_number(data.get("autorefresh")):
            config.autorefresh = data["autorefresh"]
        if isinstance(data.get("apiKey"), str):
            config.api_key = data["apiKey"]
        if data.get("provider") in SUPPORTED_PROVIDERS:
            config.provider = data["provider"]

        return config


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


class ConfigSaveError(OSError):
    """Raised when the configuration file could not be written."""


class ConfigStore:
    """Loads and saves the JSON configuration file."""

    def __init__(self, path: str = CONFIG_FILE):
        self.path = path

    def load(self) -> Configuration:
        """Read the configuration, falling back to the defaults on any problem."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.debug("No config file at %s, using defaults", self.path)
            return Configuration()
        except (OSError, ValueError) as e:
            logger.debug("Could not read config file %s (%s), using defaults", self.path, e)
            return Configuration()

        if not isinstance(data, dict):
            logger.debug("Config file %s does not hold an object, using defaults", self.path)
            return Configuration()

        return Configuration.from_dict(data)

    def save(self, configuration: Configuration) -> None:
        """Write the full configuration, replacing the previous file only once the write is complete."""
        content = json.dumps(configuration.to_dict(), indent=4, ensure_ascii=False)
        directory = os.path.dirname(os.path.abspath(self.path))

        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".config-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise ConfigSaveError(f"Could not write {self.path}: {e}") from e

        logger.debug("Saved configuration to %s", self.path)

    def reset(self) -> Configuration:
        """Overwrite the file with the built-in defaults and return them."""
        configuration = Configuration()
        self.save(configuration)
        return configuration
