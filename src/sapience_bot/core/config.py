"""Configuration management for the Sapience trading bot."""

import os
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, cast

import yaml
from dotenv import load_dotenv

from sapience_bot.core.units import parse_ether

_DEFAULT_API_URL = "https://api.sapience.xyz"
_DEFAULT_RPC_URL = "https://mainnet.base.org"
_DEFAULT_MODEL = "gpt-4o-search-preview"
_DEFAULT_TIMEOUT = 30.0
_DEFAULT_WAGER = "1"


class ConfigError(Exception):
    """Raise when configuration loading or validation fails."""


class ConfigLoader:
    """Load and manage configuration from YAML files with environment variable substitution."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config loader.

        Load environment variables from a ``.env`` file (if present) and
        then read YAML configuration from the given directory.

        Args:
            config_dir: Directory containing config files. Defaults to src/sapience_bot/config.

        """
        load_dotenv()
        if config_dir is None:
            config_dir = Path(__file__).parent.parent / "config"
        self.config_dir = Path(config_dir)
        self._config: dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML files."""
        settings_file = self.config_dir / "settings.yaml"
        if settings_file.exists():
            with settings_file.open() as f:
                self._config = yaml.safe_load(f) or {}

        # Override with local settings if exists
        local_settings = self.config_dir / "settings.local.yaml"
        if local_settings.exists():
            with local_settings.open() as f:
                local_config = cast("dict[str, Any]", yaml.safe_load(f) or {})
                self._deep_merge(self._config, local_config)

        self._config = self._substitute_env_vars(self._config)

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> None:
        """Deep merge override dict into base dict.

        Args:
            base: Base dictionary to merge into (modified in place).
            override: Dictionary with values to override.

        """
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], cast("dict[str, Any]", value))
            else:
                base[key] = value

    def _substitute_env_vars(self, config: Any) -> Any:
        """Recursively substitute environment variables in config.

        Supports format: ${VAR_NAME:default_value} or ${VAR_NAME}.  An empty
        default (``${VAR_NAME:}``) marks the variable optional.

        Args:
            config: Configuration value (dict, list, or str).

        Returns:
            Configuration with environment variables substituted.

        """
        if isinstance(config, dict):
            return {
                k: self._substitute_env_vars(v)
                for k, v in config.items()  # pyright: ignore[reportUnknownVariableType]
            }
        if isinstance(config, list):
            return [
                self._substitute_env_vars(item)
                for item in config  # pyright: ignore[reportUnknownVariableType]
            ]
        if isinstance(config, str) and config.startswith("${") and config.endswith("}"):
            var_expr = config[2:-1]
            if ":" in var_expr:
                var_name, default = var_expr.split(":", 1)
            else:
                var_name, default = var_expr, None

            value = os.getenv(var_name, default)
            if value is None:
                msg = f"Required environment variable ${{{var_name}}} is not set and has no default"
                raise ConfigError(msg)
            return value

        if isinstance(config, str) and re.search(r"\$\{[^}]+\}", config):
            msg = f"Unresolved environment variable reference in: {config}"
            raise ConfigError(msg)

        return config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-notation key.

        Args:
            key: Configuration key in dot notation (e.g., 'sapience.api_url').
            default: Default value if key not found.

        Returns:
            Configuration value.

        """
        keys = key.split(".")
        current: Any = self._config
        for k in keys:
            if isinstance(current, dict):
                current = cast("dict[str, Any]", current).get(k)
                if current is None:
                    return default
            else:
                return default
        return current  # pyright: ignore[reportReturnType]

    def get_bot_config(self) -> "BotConfig":
        """Build the typed bot configuration.

        Returns:
            Immutable ``BotConfig`` with empty secrets mapped to ``None``.

        Raises:
            ConfigError: When the timeout or wager is not a valid number.

        """
        try:
            timeout = float(self.get("sapience.timeout", _DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"sapience.timeout must be a number: {exc}") from exc

        wager_text = str(self.get("trading.wager", _DEFAULT_WAGER))
        try:
            wager = parse_ether(Decimal(wager_text))
        except (InvalidOperation, ValueError) as exc:
            msg = f"trading.wager must be a decimal amount, got {wager_text!r}"
            raise ConfigError(msg) from exc
        if wager <= 0:
            raise ConfigError(f"trading.wager must be positive, got {wager_text!r}")

        return BotConfig(
            api_url=str(self.get("sapience.api_url") or _DEFAULT_API_URL),
            rpc_url=str(self.get("ethereum.rpc_url") or _DEFAULT_RPC_URL),
            private_key=self.get("ethereum.private_key") or None,
            openai_api_key=self.get("openai.api_key") or None,
            openai_model=str(self.get("openai.model") or _DEFAULT_MODEL),
            timeout=timeout,
            wager=wager,
        )


@dataclass(frozen=True)
class BotConfig:
    """Immutable settings for one bot run.

    Attributes:
        api_url: Sapience API base URL.
        rpc_url: Base JSON-RPC endpoint.
        private_key: Signing key; ``None`` disables trading.
        openai_api_key: OpenAI key; ``None`` makes every prediction "Yes".
        openai_model: Chat model used for predictions.
        timeout: HTTP timeout in seconds.
        wager: Collateral wager in base units.

    """

    api_url: str = _DEFAULT_API_URL
    rpc_url: str = _DEFAULT_RPC_URL
    private_key: str | None = None
    openai_api_key: str | None = None
    openai_model: str = _DEFAULT_MODEL
    timeout: float = _DEFAULT_TIMEOUT
    wager: int = 10**18

    @property
    def can_trade(self) -> bool:
        """Whether a signing key is configured."""
        return self.private_key is not None


_config: ConfigLoader | None = None


def get_config() -> ConfigLoader:
    """Return the global ``ConfigLoader`` singleton, creating it on first use.

    Lazy initialisation avoids side effects (file I/O, ``load_dotenv``)
    at import time and makes testing easier.

    Returns:
        The shared ``ConfigLoader`` instance.

    """
    global _config  # noqa: PLW0603
    if _config is None:
        _config = ConfigLoader()
    return _config
