"""Conversions between 18-decimal base units and human-readable amounts."""

from decimal import Decimal

from web3 import Web3

WEI_PER_UNIT = 10**18


def parse_ether(amount: Decimal | str | int) -> int:
    """Convert a decimal token amount into 18-decimal base units.

    Args:
        amount: Human-readable amount (e.g. ``"1"`` or ``Decimal("0.5")``).

    Returns:
        Integer amount in base units.

    """
    return int(Web3.to_wei(Decimal(str(amount)), "ether"))


def format_ether(value: int) -> str:
    """Format base units as a decimal string with at least one fractional digit.

    ``10**18`` formats as ``"1.0"`` and ``5 * 10**17`` as ``"0.5"``.  Whole
    amounts always keep a ``.0`` suffix, so zero formats as ``"0.0"`` rather
    than the bare ``"0"`` some Ethereum libraries print.

    Args:
        value: Amount in base units.

    Returns:
        Plain (non-scientific) decimal string.

    """
    sign = "-" if value < 0 else ""
    text = format(Decimal(Web3.from_wei(abs(value), "ether")).normalize(), "f")
    if "." not in text:
        text = f"{text}.0"
    return f"{sign}{text}"
