"""CLI command that shows the public market closing next."""

import asyncio
from datetime import UTC, datetime
from typing import Annotated

import typer

from sapience_bot.apps.bot.cli._helpers import (
    build_client,
    configure_verbose_logging,
    load_bot_config,
)
from sapience_bot.apps.bot.finder import find_next_market
from sapience_bot.clients.sapience.exceptions import SapienceError


def next_market(
    verbose: Annotated[  # noqa: FBT002
        bool, typer.Option("--verbose", "-v", help="Log request details")
    ] = False,
) -> None:
    """Show the soonest-closing public sUSDS market on Base."""
    if verbose:
        configure_verbose_logging()
    asyncio.run(_next_market())


async def _next_market() -> None:
    """Fetch and display the next market."""
    config = load_bot_config()
    try:
        async with build_client(config) as client:
            market = await find_next_market(client)
    except SapienceError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"\nMarket ID: {market.market_id}")
    typer.echo(f"Market group: {market.market_group_address}")
    if market.end_timestamp is not None:
        ends = datetime.fromtimestamp(market.end_timestamp, tz=UTC)
        typer.echo(f"Ends: {ends:%Y-%m-%d %H:%M:%S} UTC")
    typer.echo(f"Question: {market.question}")
