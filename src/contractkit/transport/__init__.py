"""Ledger transports: the interface plus web3.py and in-memory implementations."""

from contractkit.transport.base import BlockHandler, Subscription, Transport
from contractkit.transport.mock import DEFAULT_RUNTIME_CODE, MockSubscription, MockTransport
from contractkit.transport.web3_transport import BlockPollSubscription, Web3Transport

__all__ = [
    "BlockHandler",
    "Subscription",
    "Transport",
    "MockTransport",
    "MockSubscription",
    "DEFAULT_RUNTIME_CODE",
    "Web3Transport",
    "BlockPollSubscription",
]
