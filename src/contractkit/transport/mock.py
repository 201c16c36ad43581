"""
In-memory ledger for tests and local experiments.

MockTransport keeps pending transactions until a block is mined, stores
contract code per address, and pushes block notifications synchronously
to subscribers. It never talks to a network.

Example:
    >>> transport = MockTransport()
    >>> factory = ContractFactory(transport, abi)
    >>> instance = await factory.new({"data": bytecode})
    >>> await transport.mine()
    >>> await instance.wait_for_deployment()
"""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from web3 import Web3

from contractkit.transport.base import BlockHandler
from contractkit.utils.logging import get_logger

__all__ = ["MockTransport", "MockSubscription", "DEFAULT_RUNTIME_CODE"]

_logger = get_logger(__name__)

# Smallest plausible runtime: PUSH1 0x80 PUSH1 0x40 MSTORE
DEFAULT_RUNTIME_CODE = "0x6080604052"

DEFAULT_SENDER = "0x" + "a" * 40


def _keccak_hex(text: str) -> str:
    return "0x" + bytes(Web3.keccak(text=text)).hex()


@dataclass
class MockSubscription:
    handler: BlockHandler
    active: bool = True
    unsubscribe_calls: int = 0

    def unsubscribe(self) -> None:
        self.unsubscribe_calls += 1
        self.active = False


@dataclass
class _Pending:
    tx_hash: str
    transaction: Dict[str, Any]
    contract_address: Optional[str]


@dataclass
class MockTransport:
    """
    Deterministic in-memory transport.

    Attributes:
        deploy_code: Code stored for contracts created by mined transactions;
            set to "0x" to simulate an out-of-gas deployment
        send_error: When set, the next send_transaction raises it
        calls: Number of calls per transport method
        sent: Every transaction accepted by send_transaction
    """

    deploy_code: str = DEFAULT_RUNTIME_CODE
    send_error: Optional[BaseException] = None
    calls: Counter = field(default_factory=Counter)
    sent: List[Dict[str, Any]] = field(default_factory=list)
    call_results: Dict[Tuple[str, str], str] = field(default_factory=dict)
    logs: List[Dict[str, Any]] = field(default_factory=list)
    block_number: int = 0

    def __post_init__(self) -> None:
        self._pending: List[_Pending] = []
        self._receipts: Dict[str, Dict[str, Any]] = {}
        self._code: Dict[str, str] = {}
        self._nonces: Counter = Counter()
        self.subscriptions: List[MockSubscription] = []

    # ------------------------------------------------------------------
    # Transport interface
    # ------------------------------------------------------------------

    async def send_transaction(self, transaction: Dict[str, Any]) -> str:
        self.calls["send_transaction"] += 1
        if self.send_error is not None:
            error, self.send_error = self.send_error, None
            raise error

        sender = transaction.get("from", DEFAULT_SENDER).lower()
        nonce = self._nonces[sender]
        self._nonces[sender] += 1

        tx_hash = _keccak_hex(f"tx:{sender}:{nonce}")
        contract_address = None
        if not transaction.get("to"):
            digest = Web3.keccak(text=f"create:{sender}:{nonce}")
            contract_address = Web3.to_checksum_address("0x" + bytes(digest[-20:]).hex())

        self.sent.append(dict(transaction))
        self._pending.append(_Pending(tx_hash, dict(transaction), contract_address))
        return tx_hash

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        self.calls["get_transaction_receipt"] += 1
        return self._receipts.get(tx_hash)

    async def get_code(self, address: str) -> str:
        self.calls["get_code"] += 1
        return self._code.get(address.lower(), "0x")

    async def call(self, transaction: Dict[str, Any], block: str = "latest") -> str:
        self.calls["call"] += 1
        key = (transaction.get("to", "").lower(), transaction.get("data", "")[:10])
        return self.call_results.get(key, "0x")

    async def get_logs(self, filter_params: Dict[str, Any]) -> List[Dict[str, Any]]:
        self.calls["get_logs"] += 1
        address = filter_params.get("address")
        topics = filter_params.get("topics") or []
        out = []
        for log in self.logs:
            if address and log.get("address", "").lower() != address.lower():
                continue
            if topics and topics[0] and log.get("topics", [None])[0] != topics[0]:
                continue
            out.append(log)
        return out

    def subscribe_new_blocks(self, handler: BlockHandler) -> MockSubscription:
        self.calls["subscribe_new_blocks"] += 1
        subscription = MockSubscription(handler)
        self.subscriptions.append(subscription)
        return subscription

    # ------------------------------------------------------------------
    # Ledger control
    # ------------------------------------------------------------------

    def set_code(self, address: str, code: str) -> None:
        self._code[address.lower()] = code

    def set_call_result(self, address: str, selector: str, result: str) -> None:
        self.call_results[(address.lower(), selector)] = result

    @property
    def pending(self) -> List[str]:
        return [p.tx_hash for p in self._pending]

    def mine_block(self, include_pending: bool = True) -> str:
        """
        Produce one block and notify subscribers.

        Args:
            include_pending: Whether pending transactions are mined into it

        Returns:
            The new block hash
        """
        self.block_number += 1
        block_hash = _keccak_hex(f"block:{self.block_number}")

        if include_pending:
            for pending in self._pending:
                self._receipts[pending.tx_hash] = {
                    "transactionHash": pending.tx_hash,
                    "blockHash": block_hash,
                    "blockNumber": self.block_number,
                    "contractAddress": pending.contract_address,
                    "status": 1,
                }
                if pending.contract_address:
                    self.set_code(pending.contract_address, self.deploy_code)
            self._pending.clear()

        _logger.debug(
            "Mock block mined",
            extra={"block_number": self.block_number, "subscribers": len(self.subscriptions)},
        )
        self._notify(None, block_hash)
        return block_hash

    def emit_error(self, error: BaseException) -> None:
        """Deliver an error notification instead of a block."""
        self._notify(error, None)

    async def mine(self, blocks: int = 1, include_pending: bool = True) -> None:
        """Mine ``blocks`` blocks, yielding to the event loop after each."""
        for _ in range(blocks):
            self.mine_block(include_pending=include_pending)
            await asyncio.sleep(0)

    def _notify(self, error: Optional[BaseException], block_hash: Optional[str]) -> None:
        for subscription in list(self.subscriptions):
            if subscription.active:
                subscription.handler(error, block_hash)
