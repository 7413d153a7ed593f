"""Shared helpers for the bot CLI commands.

Centralise logging setup, configuration loading and client construction
so every command builds its collaborators the same way.
"""

import dataclasses
import logging
from decimal import Decimal, InvalidOperation

import typer

from sapience_bot.clients.llm.predictor import Predictor
from sapience_bot.clients.sapience.client import SapienceClient
from sapience_bot.core.config import BotConfig, ConfigError, get_config
from sapience_bot.core.units import parse_ether


def configure_verbose_logging() -> None:
    """Enable INFO-level logging for request and transaction details."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(message)s",
        datefmt="%H:%M:%S",
    )


def load_bot_config(wager: float | None = None) -> BotConfig:
    """Load the bot configuration, applying a command-line wager override.

    Args:
        wager: Collateral wager in whole sUSDS, or ``None`` for the configured value.

    Returns:
        Immutable bot configuration.

    """
    try:
        config = get_config().get_bot_config()
    except ConfigError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if wager is None:
        return config
    try:
        wager_units = parse_ether(Decimal(str(wager)))
    except (InvalidOperation, ValueError):
        wager_units = 0
    if wager_units <= 0:
        typer.echo(f"Error: Wager must be a positive amount, got '{wager}'.", err=True)
        raise typer.Exit(code=1)
    return dataclasses.replace(config, wager=wager_units)


def build_client(config: BotConfig) -> SapienceClient:
    """Build a Sapience API client from the configuration."""
    return SapienceClient(base_url=config.api_url, timeout=config.timeout)


def build_predictor(config: BotConfig) -> Predictor:
    """Build the outcome predictor from the configuration."""
    return Predictor(api_key=config.openai_api_key, model=config.openai_model)
