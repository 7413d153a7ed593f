"""Typed data models for Sapience prediction market data.

Provide frozen dataclasses that insulate the rest of the codebase from the
untyped dictionaries returned by the GraphQL and quoter APIs.  On-chain
amounts are plain ``int`` values in base units (18 decimals).
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Market:
    """A single prediction market inside a market group.

    Args:
        market_id: Numeric market identifier within its group.
        question: The prediction question shown to traders.
        end_timestamp: Unix seconds when the market closes, if known.
        public: Whether the market is listed publicly.
        market_group_address: Address of the owning market group contract.

    """

    market_id: int
    question: str
    end_timestamp: int | None
    public: bool
    market_group_address: str


@dataclass(frozen=True)
class MarketGroup:
    """A market group contract and the future-ending markets it holds.

    Args:
        address: Market group contract address.
        markets: Markets returned for this group.

    """

    address: str
    markets: tuple[Market, ...]


@dataclass(frozen=True)
class Quote:
    """Maximum position size obtainable for a collateral wager.

    Args:
        position_size: Quantity of outcome tokens, parsed from ``maxSize``.
        collateral_available: Wager amount in collateral base units.
        expected_price: Decimal price string sent to the quoter.

    """

    position_size: int
    collateral_available: int
    expected_price: str


@dataclass(frozen=True)
class TradeResult:
    """Hashes of the confirmed approval and position transactions.

    Args:
        approve_tx_hash: Hex hash of the ERC-20 approval.
        trade_tx_hash: Hex hash of the ``createTraderPosition`` call.
        explorer_url: Block explorer link for the trade transaction.

    """

    approve_tx_hash: str
    trade_tx_hash: str
    explorer_url: str
