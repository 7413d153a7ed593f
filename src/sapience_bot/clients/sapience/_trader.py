"""Open a trader position on a Sapience market group contract.

Approve the market group to spend the collateral wager, then call
``createTraderPosition`` on the group.  Both transactions are signed
locally with the configured key and awaited until mined.

There is no rollback: when the position call fails after a confirmed
approval, the allowance stays in place and the error propagates.
"""

import logging
import time
from typing import Any

from web3 import Web3
from web3.types import Nonce, TxParams, TxReceipt

from sapience_bot.clients.sapience._constants import BASE_EXPLORER_URL, SUSDS_ADDRESS
from sapience_bot.clients.sapience.exceptions import (
    SapienceAPIError,
    TradingKeyMissingError,
    TransactionFailedError,
)
from sapience_bot.clients.sapience.models import TradeResult

logger = logging.getLogger(__name__)

# Minimum ABI for ERC-20 approve
_ERC20_APPROVE_ABI: list[dict[str, Any]] = [
    {
        "name": "approve",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "value", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
]

# Market group createTraderPosition ABI; a negative size opens a short
_CREATE_TRADER_POSITION_ABI: list[dict[str, Any]] = [
    {
        "name": "createTraderPosition",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "marketId", "type": "uint256"},
            {"name": "size", "type": "int256"},
            {"name": "maxCollateral", "type": "uint256"},
            {"name": "deadline", "type": "uint256"},
        ],
        "outputs": [{"name": "positionId", "type": "uint256"}],
    },
]

DEADLINE_SECONDS = 60 * 60
_TX_RECEIPT_TIMEOUT = 120


def _send_and_wait(w3: Web3, tx: TxParams, private_key: str, step: str) -> str:
    """Sign and broadcast a built transaction, then block until it is mined.

    Args:
        w3: Connected Web3 instance.
        tx: Fully built transaction parameters.
        private_key: Hex-encoded signing key.
        step: Step name used in logs and errors.

    Returns:
        Hex transaction hash.

    Raises:
        TransactionFailedError: When the mined receipt reports a revert.

    """
    signed = w3.eth.account.sign_transaction(tx, private_key=private_key)
    tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
    receipt: TxReceipt = w3.eth.wait_for_transaction_receipt(tx_hash, timeout=_TX_RECEIPT_TIMEOUT)
    hex_hash = Web3.to_hex(tx_hash)
    if receipt["status"] != 1:
        raise TransactionFailedError(step, hex_hash)
    logger.info("%s confirmed (gas used: %d, tx: %s)", step, receipt["gasUsed"], hex_hash)
    return hex_hash


def submit_trade(
    rpc_url: str,
    private_key: str | None,
    market_address: str,
    market_id: int,
    position_size: int,
    *,
    wager: int,
    deadline: int | None = None,
) -> TradeResult:
    """Approve the collateral wager and create a trader position.

    Args:
        rpc_url: Base JSON-RPC endpoint URL.
        private_key: Hex-encoded private key of the trading account.
        market_address: Market group contract address.
        market_id: Market identifier within the group.
        position_size: Position size returned by the quoter.
        wager: Maximum collateral to spend, in base units.
        deadline: Unix seconds after which the position call reverts.
            Defaults to one hour from now.

    Returns:
        Hashes of both confirmed transactions and an explorer link.

    Raises:
        TradingKeyMissingError: When no private key is configured.
        SapienceAPIError: When the RPC connection cannot be established.
        TransactionFailedError: When either transaction reverts.

    """
    if not private_key:
        raise TradingKeyMissingError("Ethereum private key is not set in environment variables.")

    w3 = Web3(Web3.HTTPProvider(rpc_url))
    if not w3.is_connected():
        raise SapienceAPIError(
            msg=f"Cannot connect to Base RPC at {rpc_url}",
            status_code=0,
        )

    account = w3.eth.account.from_key(private_key)
    market = Web3.to_checksum_address(market_address)
    token = w3.eth.contract(
        address=Web3.to_checksum_address(SUSDS_ADDRESS),
        abi=_ERC20_APPROVE_ABI,
    )
    group = w3.eth.contract(address=market, abi=_CREATE_TRADER_POSITION_ABI)
    nonce = w3.eth.get_transaction_count(account.address, "pending")

    logger.info("Approving token spend of %d for %s", wager, market)
    approve_tx = token.functions.approve(market, wager).build_transaction(
        {"from": account.address, "nonce": Nonce(nonce)}
    )
    approve_hash = _send_and_wait(w3, approve_tx, private_key, "approve")

    if deadline is None:
        deadline = int(time.time()) + DEADLINE_SECONDS

    logger.info("Creating trader position of size %d on market %d", position_size, market_id)
    trade_tx = group.functions.createTraderPosition(
        market_id, position_size, wager, deadline
    ).build_transaction({"from": account.address, "nonce": Nonce(nonce + 1)})
    trade_hash = _send_and_wait(w3, trade_tx, private_key, "createTraderPosition")

    return TradeResult(
        approve_tx_hash=approve_hash,
        trade_tx_hash=trade_hash,
        explorer_url=f"{BASE_EXPLORER_URL}/tx/{trade_hash}",
    )
