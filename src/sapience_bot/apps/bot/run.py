"""CLI entry point for the Sapience trading bot.

All command logic lives in the cli subpackage.
"""

from sapience_bot.apps.bot.cli import app

__all__ = ["app", "main"]


def main() -> None:
    """Run the Sapience bot CLI application."""
    app()


if __name__ == "__main__":
    main()
