"""Turn a prediction into a position-size quote."""

from sapience_bot.clients.sapience._constants import BASE_CHAIN_ID
from sapience_bot.clients.sapience.client import SapienceClient
from sapience_bot.clients.sapience.models import Quote
from sapience_bot.core.units import format_ether

# The quoter rejects non-positive prices, so "no" is quoted just above zero
NO_EXPECTED_PRICE = "0.0000009"


def expected_price_string(prediction: int) -> str:
    """Convert an 18-decimal prediction into the quoter's price string.

    Args:
        prediction: ``0`` for no, ``10**18`` for yes.

    Returns:
        ``"0.0000009"`` for no, otherwise the decimal value (e.g. ``"1.0"``).

    """
    if prediction == 0:
        return NO_EXPECTED_PRICE
    return format_ether(prediction)


async def get_quote_for_prediction(
    client: SapienceClient,
    market_address: str,
    market_id: int,
    prediction: int,
    wager: int,
) -> Quote:
    """Quote the maximum position size for ``wager`` on a Base market.

    Args:
        client: Sapience API client.
        market_address: Market group contract address.
        market_id: Market identifier within the group.
        prediction: ``0`` for no, ``10**18`` for yes.
        wager: Collateral wager in base units.

    Returns:
        Quote from the Sapience quoter.

    Raises:
        SapienceAPIError: When the quoter rejects the request.

    """
    return await client.get_quote(
        chain_id=BASE_CHAIN_ID,
        market_address=market_address,
        market_id=market_id,
        collateral_available=wager,
        expected_price=expected_price_string(prediction),
    )
