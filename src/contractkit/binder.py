"""
Capability binding: the callable surface of a contract instance.

Bound functions and events are plain data (ABI entry + address) plus the
transport used to execute them. Binding builds a fresh CapabilitySet from
the instance's ABI and current address, so rebinding after deployment
replaces every handle that was created while the address was unknown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterator, List, Mapping, Optional, TypeVar

from eth_abi import decode, encode
from web3 import Web3

from contractkit.abi.types import AbiEntry
from contractkit.errors import ContractKitError
from contractkit.instance import ContractInstance
from contractkit.transport.base import Transport
from contractkit.utils.logging import get_logger

__all__ = [
    "BoundFunction",
    "BoundEvent",
    "AllEvents",
    "Namespace",
    "CapabilitySet",
    "bind",
]

_logger = get_logger(__name__)

T = TypeVar("T")


def _keccak_hex(text: str) -> str:
    return Web3.to_hex(Web3.keccak(text=text))


def _require_address(address: Optional[str], signature: str) -> str:
    if address is None:
        raise ContractKitError(
            f"Cannot use {signature} before the contract has an address",
            code="NO_ADDRESS",
            details={"member": signature},
        )
    return address


@dataclass(frozen=True)
class BoundFunction:
    """
    A contract function bound to an address.

    Calling the handle runs ``call`` for view/pure functions and
    ``transact`` otherwise; both are coroutines.
    """

    entry: AbiEntry
    address: Optional[str]
    transport: Transport

    @property
    def name(self) -> str:
        return self.entry.name

    @property
    def signature(self) -> str:
        return self.entry.signature

    @property
    def selector(self) -> str:
        """First four bytes of the signature hash, 0x-prefixed."""
        return _keccak_hex(self.signature)[:10]

    def encode_input(self, *args: Any) -> str:
        """Calldata for ``args``: selector followed by the encoded arguments."""
        if len(args) != self.entry.arity:
            raise ContractKitError(
                f"{self.signature} takes {self.entry.arity} arguments, got {len(args)}",
                code="ARGUMENT_COUNT",
            )
        return self.selector + encode(list(self.entry.input_types), list(args)).hex()

    def decode_output(self, raw: str) -> Any:
        output_types = list(self.entry.output_types)
        if not output_types:
            return None
        decoded = decode(output_types, bytes.fromhex(raw[2:] if raw.startswith("0x") else raw))
        if len(decoded) == 1:
            return decoded[0]
        return decoded

    async def call(
        self,
        *args: Any,
        block: str = "latest",
        options: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Execute read-only and return the decoded output."""
        tx = dict(options or {})
        tx["to"] = _require_address(self.address, self.signature)
        tx["data"] = self.encode_input(*args)
        raw = await self.transport.call(tx, block)
        return self.decode_output(raw)

    async def transact(self, *args: Any, options: Optional[Mapping[str, Any]] = None) -> str:
        """Send a transaction invoking the function; returns its hash."""
        tx = dict(options or {})
        tx["to"] = _require_address(self.address, self.signature)
        tx["data"] = self.encode_input(*args)
        return await self.transport.send_transaction(tx)

    def __call__(self, *args: Any, **kwargs: Any):
        if self.entry.is_constant:
            return self.call(*args, **kwargs)
        return self.transact(*args, **kwargs)


@dataclass(frozen=True)
class BoundEvent:
    """An event declaration bound to an address. Logs are returned undecoded."""

    entry: AbiEntry
    address: Optional[str]
    transport: Transport

    @property
    def name(self) -> str:
        return self.entry.name

    @property
    def signature(self) -> str:
        return self.entry.signature

    @property
    def topic(self) -> Optional[str]:
        """Topic 0 for this event; anonymous events have none."""
        if self.entry.anonymous:
            return None
        return _keccak_hex(self.signature)

    def filter_params(
        self,
        from_block: Any = None,
        to_block: Any = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"address": _require_address(self.address, self.signature)}
        if self.topic is not None:
            params["topics"] = [self.topic]
        if from_block is not None:
            params["fromBlock"] = from_block
        if to_block is not None:
            params["toBlock"] = to_block
        return params

    async def get_logs(self, from_block: Any = None, to_block: Any = None) -> List[Dict[str, Any]]:
        return await self.transport.get_logs(self.filter_params(from_block, to_block))


@dataclass(frozen=True)
class AllEvents:
    """Aggregate handle over every event declared by the contract."""

    entries: tuple
    address: Optional[str]
    transport: Transport

    def filter_params(self, from_block: Any = None, to_block: Any = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"address": _require_address(self.address, "allEvents")}
        if from_block is not None:
            params["fromBlock"] = from_block
        if to_block is not None:
            params["toBlock"] = to_block
        return params

    def event_for_topic(self, topic: str) -> Optional[AbiEntry]:
        """Return the declaration whose topic 0 equals ``topic``."""
        for entry in self.entries:
            if not entry.anonymous and _keccak_hex(entry.signature) == topic.lower():
                return entry
        return None

    async def get_logs(self, from_block: Any = None, to_block: Any = None) -> List[Dict[str, Any]]:
        return await self.transport.get_logs(self.filter_params(from_block, to_block))


class Namespace(Generic[T]):
    """
    Attribute-style access to bound members.

    Members are registered under their bare name (first overload in
    declaration order wins) and under their full signature.
    """

    def __init__(self, members: List[T]) -> None:
        self._members: Dict[str, T] = {}
        for member in members:
            self._members.setdefault(member.name, member)  # type: ignore[attr-defined]
            self._members[member.signature] = member  # type: ignore[attr-defined]
        self._ordered = list(members)

    def __getattr__(self, name: str) -> T:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._members[name]
        except KeyError:
            raise AttributeError(f"No ABI member named {name!r}")

    def __getitem__(self, name: str) -> T:
        return self._members[name]

    def __contains__(self, name: object) -> bool:
        return name in self._members

    def __iter__(self) -> Iterator[T]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def get(self, name: str) -> Optional[T]:
        return self._members.get(name)


@dataclass(frozen=True)
class CapabilitySet:
    """Everything callable on an instance for one particular address."""

    address: Optional[str]
    functions: Namespace
    events: Namespace
    all_events: AllEvents

    def lookup(self, name: str) -> Any:
        if name in ("allEvents", "all_events"):
            return self.all_events
        found = self.functions.get(name)
        if found is None:
            found = self.events.get(name)
        return found


def bind(instance: ContractInstance) -> CapabilitySet:
    """
    Build and attach the capability set for the instance's current address.

    Safe to call repeatedly; each call replaces the previous set.
    """
    transport = instance.transport
    address = instance.address
    event_entries = instance.abi.events

    capabilities = CapabilitySet(
        address=address,
        functions=Namespace(
            [BoundFunction(e, address, transport) for e in instance.abi.functions]
        ),
        events=Namespace([BoundEvent(e, address, transport) for e in event_entries]),
        all_events=AllEvents(tuple(event_entries), address, transport),
    )
    instance.capabilities = capabilities

    _logger.debug(
        "Bound contract capabilities",
        extra={
            "address": address,
            "functions": len(capabilities.functions),
            "events": len(capabilities.events),
        },
    )
    return capabilities
