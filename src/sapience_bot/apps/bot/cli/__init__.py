"""CLI subpackage for the Sapience trading bot.

Create the Typer application and register all command modules.
"""

import typer

from sapience_bot.apps.bot.cli.markets_cmd import next_market
from sapience_bot.apps.bot.cli.quote_cmd import quote
from sapience_bot.apps.bot.cli.run_cmd import run

app = typer.Typer(help="Sapience prediction market trading bot")

app.command()(run)
app.command(name="next-market")(next_market)
app.command()(quote)

__all__ = ["app"]
