"""
Transport interface consumed by the factory, poller and bound callables.

A transport is the only place where contractkit suspends: every method
that talks to the ledger is a coroutine. Block notifications are pushed
to a synchronous handler.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable

__all__ = ["BlockHandler", "Subscription", "Transport"]

# handler(error, block_hash); exactly one of the two is set
BlockHandler = Callable[[Optional[BaseException], Optional[str]], None]


@runtime_checkable
class Subscription(Protocol):
    def unsubscribe(self) -> None:
        """Stop delivering notifications. Safe to call more than once."""


@runtime_checkable
class Transport(Protocol):
    """
    Ledger client used by contractkit.

    Receipts are dicts carrying at least ``blockHash`` and
    ``contractAddress``; code is a 0x-prefixed hex string.
    """

    async def send_transaction(self, transaction: Dict[str, Any]) -> str:
        """Submit a transaction and return its hash."""

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        """Return the receipt, or None while the transaction is pending."""

    async def get_code(self, address: str) -> str:
        """Return the code stored at ``address`` ("0x" when empty)."""

    async def call(self, transaction: Dict[str, Any], block: str = "latest") -> str:
        """Execute a read-only call and return the raw hex result."""

    async def get_logs(self, filter_params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Return raw (undecoded) logs matching ``filter_params``."""

    def subscribe_new_blocks(self, handler: BlockHandler) -> Subscription:
        """Invoke ``handler`` once per new block until unsubscribed."""
