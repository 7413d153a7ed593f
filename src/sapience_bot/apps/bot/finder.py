"""Select the public market that closes next."""

import logging
import math
import time

from sapience_bot.clients.sapience._constants import (
    BASE_CHAIN_ID,
    BASE_TOKEN_NAME,
    SUSDS_ADDRESS,
)
from sapience_bot.clients.sapience.client import SapienceClient
from sapience_bot.clients.sapience.exceptions import NoActiveMarketsError
from sapience_bot.clients.sapience.models import Market, MarketGroup

logger = logging.getLogger(__name__)


def select_next_market(groups: list[MarketGroup]) -> Market:
    """Return the public market with the earliest end timestamp.

    Markets without an end timestamp sort last.  On ties the first market
    encountered wins.

    Args:
        groups: Market groups as returned by the API.

    Returns:
        The soonest-closing public market.

    Raises:
        NoActiveMarketsError: When no market in any group is public.

    """
    best: Market | None = None
    best_time = math.inf
    for group in groups:
        for market in group.markets:
            if market.public is not True:
                continue
            end = market.end_timestamp if market.end_timestamp is not None else math.inf
            if best is None or end < best_time:
                best, best_time = market, end

    if best is None:
        raise NoActiveMarketsError("No active markets found.")
    return best


async def find_next_market(client: SapienceClient, now: int | None = None) -> Market:
    """Query sUSDS market groups on Base and pick the next one to close.

    Args:
        client: Sapience API client.
        now: Unix seconds to filter against; defaults to the current time.

    Returns:
        The soonest-closing public market.

    Raises:
        SapienceAPIError: When the API call fails.
        NoActiveMarketsError: When no public market ends in the future.

    """
    current_time = int(time.time()) if now is None else now
    groups = await client.get_market_groups(
        chain_id=BASE_CHAIN_ID,
        collateral_asset=SUSDS_ADDRESS,
        base_token_name=BASE_TOKEN_NAME,
        current_time=current_time,
    )
    market = select_next_market(groups)
    logger.info("Next market %d ends at %s", market.market_id, market.end_timestamp)
    return market
