"""Sapience prediction market client: market discovery, quotes and trading."""

from sapience_bot.clients.sapience._trader import submit_trade
from sapience_bot.clients.sapience.client import SapienceClient
from sapience_bot.clients.sapience.exceptions import (
    NoActiveMarketsError,
    SapienceAPIError,
    SapienceError,
    TradingKeyMissingError,
    TransactionFailedError,
)
from sapience_bot.clients.sapience.models import Market, MarketGroup, Quote, TradeResult

__all__ = [
    "Market",
    "MarketGroup",
    "NoActiveMarketsError",
    "Quote",
    "SapienceAPIError",
    "SapienceClient",
    "SapienceError",
    "TradeResult",
    "TradingKeyMissingError",
    "TransactionFailedError",
    "submit_trade",
]
