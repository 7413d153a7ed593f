"""CLI command that quotes a position for a given market and outcome."""

import asyncio
from typing import Annotated

import typer

from sapience_bot.apps.bot.cli._helpers import (
    build_client,
    configure_verbose_logging,
    load_bot_config,
)
from sapience_bot.apps.bot.quoting import get_quote_for_prediction
from sapience_bot.clients.sapience.exceptions import SapienceError
from sapience_bot.core.units import WEI_PER_UNIT, format_ether

_PREDICTIONS = {"yes": WEI_PER_UNIT, "no": 0}


def quote(
    market_address: Annotated[str, typer.Option(help="Market group contract address")],
    market_id: Annotated[int, typer.Option(help="Market ID within the group")],
    prediction: Annotated[str, typer.Option(help="Predicted outcome: yes or no")],
    wager: Annotated[
        float | None, typer.Option(help="Collateral wager in sUSDS (default from settings)")
    ] = None,
    verbose: Annotated[  # noqa: FBT002
        bool, typer.Option("--verbose", "-v", help="Log request details")
    ] = False,
) -> None:
    """Quote the maximum position size for a wager on a market outcome.

    Args:
        market_address: Market group contract address.
        market_id: Market ID within the group.
        prediction: Predicted outcome (yes or no).
        wager: Collateral wager in sUSDS.
        verbose: Enable INFO-level logging.

    """
    value = _PREDICTIONS.get(prediction.lower())
    if value is None:
        typer.echo(f"Error: Prediction must be 'yes' or 'no', got '{prediction}'.", err=True)
        raise typer.Exit(code=1)
    if verbose:
        configure_verbose_logging()
    asyncio.run(
        _quote(market_address=market_address, market_id=market_id, prediction=value, wager=wager)
    )


async def _quote(
    *,
    market_address: str,
    market_id: int,
    prediction: int,
    wager: float | None,
) -> None:
    """Fetch and display a quote."""
    config = load_bot_config(wager)
    try:
        async with build_client(config) as client:
            result = await get_quote_for_prediction(
                client, market_address, market_id, prediction, config.wager
            )
    except SapienceError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"\nWager: {format_ether(result.collateral_available)} sUSDS")
    typer.echo(f"Expected price: {result.expected_price}")
    typer.echo(f"Position size: {format_ether(result.position_size)}")
