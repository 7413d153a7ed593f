"""Shared test configuration and fixtures."""

import os
from collections.abc import Iterator
from unittest.mock import patch

import pytest

import sapience_bot.core.config as config_module

_SECRET_ENV_VARS = ("ETHEREUM_PRIVATE_KEY", "OPENAI_API_KEY")


@pytest.fixture(autouse=True)
def _isolate_config() -> Iterator[None]:  # pyright: ignore[reportUnusedFunction]
    """Hide real signing and API keys from tests and reset the config singleton.

    A developer's ``.env`` or shell may hold live keys.  Strip them and stop
    ``ConfigLoader`` from reading ``.env`` so tests never see a trading key.
    """
    cleaned = {k: v for k, v in os.environ.items() if k not in _SECRET_ENV_VARS}
    config_module._config = None
    with (
        patch.dict(os.environ, cleaned, clear=True),
        patch("sapience_bot.core.config.load_dotenv"),
    ):
        yield
    config_module._config = None
