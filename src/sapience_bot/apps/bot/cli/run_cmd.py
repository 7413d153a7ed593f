"""CLI command that runs the full predict-quote-trade flow once.

Find the next public market to close, ask the model for an answer, quote a
position for the configured wager and submit it on-chain when a signing key
is configured.  Without a key the computed trade size is printed instead.
"""

import asyncio
from typing import Annotated

import typer

from sapience_bot.apps.bot.cli._helpers import (
    build_client,
    build_predictor,
    configure_verbose_logging,
    load_bot_config,
)
from sapience_bot.apps.bot.finder import find_next_market
from sapience_bot.apps.bot.quoting import get_quote_for_prediction
from sapience_bot.clients.llm.exceptions import LLMError
from sapience_bot.clients.llm.predictor import Predictor, parse_prediction
from sapience_bot.clients.sapience._trader import submit_trade
from sapience_bot.clients.sapience.exceptions import SapienceError
from sapience_bot.core.config import BotConfig
from sapience_bot.core.units import format_ether


def run(
    dry_run: Annotated[  # noqa: FBT002
        bool, typer.Option("--dry-run", help="Print the trade size without submitting")
    ] = False,
    wager: Annotated[
        float | None, typer.Option(help="Collateral wager in sUSDS (default from settings)")
    ] = None,
    verbose: Annotated[  # noqa: FBT002
        bool, typer.Option("--verbose", "-v", help="Log request and transaction details")
    ] = False,
) -> None:
    """Predict the next closing market and trade on the answer.

    Args:
        dry_run: Skip trade submission even when a private key is set.
        wager: Collateral wager in sUSDS.
        verbose: Enable INFO-level logging.

    """
    if verbose:
        configure_verbose_logging()
    config = load_bot_config(wager)
    asyncio.run(_run(config, submit=not dry_run))


async def _predict(predictor: Predictor, question: str) -> int:
    """Ask the model, echoing its answer, and parse the prediction."""
    if not predictor.enabled:
        typer.echo('  OpenAI API key not found. Defaulting to "Yes".')
        return await predictor.predict(question)
    answer = await predictor.ask(question)
    typer.echo(f"  {answer}")
    return parse_prediction(answer)


async def _run(config: BotConfig, *, submit: bool) -> None:
    """Execute the four steps in order, stopping at the first failure.

    Args:
        config: Bot configuration.
        submit: Whether a configured key may be used to trade.

    """
    try:
        async with build_client(config) as client:
            market = await find_next_market(client)
            typer.echo("Found an active market...")
            typer.echo(f"\n  {market.question}\n")

            typer.echo("Asking ChatGPT for an answer...\n")
            prediction = await _predict(build_predictor(config), market.question)

            typer.echo(
                f"\nRetrieving a quote for a {format_ether(config.wager)} sUSDS wager "
                f'on market outcome "{prediction}"...\n'
            )
            result = await get_quote_for_prediction(
                client,
                market.market_group_address,
                market.market_id,
                prediction,
                config.wager,
            )

        if submit and config.can_trade:
            typer.echo(f"Submitting trade with a size of {format_ether(result.position_size)}...")
            typer.echo("  Approving token spend, then creating trader position...")
            trade = await asyncio.to_thread(
                submit_trade,
                config.rpc_url,
                config.private_key,
                market.market_group_address,
                market.market_id,
                result.position_size,
                wager=config.wager,
            )
            typer.echo("\nSuccess!")
            typer.echo(trade.explorer_url)
        else:
            typer.echo(f"Trade Size: {format_ether(result.position_size)}")
            if not config.can_trade:
                typer.echo("Add an Ethereum private key to your .env file to submit trades.")
    except (SapienceError, LLMError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo("\nDone!")
