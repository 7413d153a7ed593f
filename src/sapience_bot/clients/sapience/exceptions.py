"""Exception hierarchy for Sapience client errors.

A base exception class with a specialised API error that carries status
code and message attributes, plus the domain failures of the trading flow.
"""


class SapienceError(Exception):
    """Base exception for all Sapience client errors."""


class SapienceAPIError(SapienceError):
    """Error returned by a Sapience API or RPC call.

    Carry a human-readable message and an HTTP status code so callers
    can distinguish transport failures from client errors.  RPC
    connection failures use status code ``0``.

    Args:
        msg: Human-readable description of the error.
        status_code: HTTP status code from the API response.

    """

    def __init__(self, msg: str, status_code: int) -> None:
        """Initialize Sapience API error.

        Args:
            msg: Human-readable description of the error.
            status_code: HTTP status code from the API response.

        """
        super().__init__(f"[{status_code}] {msg}")
        self.msg = msg
        self.status_code = status_code


class NoActiveMarketsError(SapienceError):
    """Raise when no public market ends in the future."""


class TradingKeyMissingError(SapienceError):
    """Raise when a trade is attempted without a signing key configured."""


class TransactionFailedError(SapienceError):
    """An on-chain transaction was mined but reverted.

    Args:
        step: Name of the step that failed (e.g. ``"approve"``).
        tx_hash: Hex hash of the reverted transaction.

    """

    def __init__(self, step: str, tx_hash: str) -> None:
        """Initialize the transaction failure.

        Args:
            step: Name of the step that failed.
            tx_hash: Hex hash of the reverted transaction.

        """
        super().__init__(f"{step} transaction reverted: {tx_hash}")
        self.step = step
        self.tx_hash = tx_hash
