"""
Contract instances and deployment options.

A ContractInstance is handed back by the factory before its deployment is
confirmed. Its address and transaction hash are each assigned once, and
its callable surface (functions and events) lives in a CapabilitySet that
is recomputed when the address becomes known.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

from contractkit.abi.types import AbiDescriptor
from contractkit.errors import ContractKitError
from contractkit.utils.validation import normalize_hex, validate_value

if TYPE_CHECKING:
    from contractkit.binder import AllEvents, CapabilitySet, Namespace
    from contractkit.poller import ConfirmationPoller
    from contractkit.transport.base import Transport

__all__ = ["DeploymentOptions", "ContractInstance"]


@dataclass
class DeploymentOptions:
    """
    Transaction fields for a deployment.

    Attributes:
        data: Creation bytecode (0x-prefixed hex); encoded constructor
            arguments are appended to it
        value: Wei sent to the constructor
        extra: Transport-specific fields (from, gas, gasPrice, nonce, ...)
    """

    data: str = "0x"
    value: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.data = normalize_hex(self.data)
        self.value = validate_value(self.value)

    @classmethod
    def coerce(cls, options: Union[DeploymentOptions, Mapping[str, Any], None]) -> DeploymentOptions:
        if options is None:
            return cls()
        if isinstance(options, DeploymentOptions):
            return cls(data=options.data, value=options.value, extra=dict(options.extra))
        extra = {k: v for k, v in options.items() if k not in ("data", "value")}
        return cls(data=options.get("data"), value=options.get("value", 0), extra=extra)

    def append_data(self, encoded: bytes) -> None:
        self.data += encoded.hex()

    def to_transaction(self) -> Dict[str, Any]:
        tx = dict(self.extra)
        tx["data"] = self.data
        tx["value"] = self.value
        return tx


class ContractInstance:
    """
    A contract known by ABI and, once deployed, by address.

    Functions and events are reachable through ``functions`` and
    ``events`` namespaces, and directly as attributes:

        >>> instance.functions.balanceOf("0x...")
        >>> instance.balanceOf("0x...")  # same thing
    """

    def __init__(
        self,
        transport: Transport,
        abi: AbiDescriptor,
        address: Optional[str] = None,
    ) -> None:
        self._transport = transport
        self.abi = abi
        self._address = address
        self._transaction_hash: Optional[str] = None
        self._capabilities: Optional[CapabilitySet] = None
        self._deployment: Optional[asyncio.Future] = None
        self.poller: Optional[ConfirmationPoller] = None

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def address(self) -> Optional[str]:
        return self._address

    @address.setter
    def address(self, value: str) -> None:
        if self._address is not None:
            raise ContractKitError(
                "Contract address is already set",
                code="ADDRESS_ALREADY_SET",
                details={"address": self._address, "new_address": value},
            )
        self._address = value

    @property
    def transaction_hash(self) -> Optional[str]:
        return self._transaction_hash

    @transaction_hash.setter
    def transaction_hash(self, value: str) -> None:
        if self._transaction_hash is not None:
            raise ContractKitError(
                "Transaction hash is already set",
                code="TX_HASH_ALREADY_SET",
                details={"tx_hash": self._transaction_hash, "new_tx_hash": value},
            )
        self._transaction_hash = value

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    @property
    def capabilities(self) -> Optional[CapabilitySet]:
        return self._capabilities

    @capabilities.setter
    def capabilities(self, value: CapabilitySet) -> None:
        self._capabilities = value

    def _require_capabilities(self) -> CapabilitySet:
        if self._capabilities is None:
            raise ContractKitError(
                "Contract functions and events are not bound yet",
                code="NOT_BOUND",
                details={"tx_hash": self._transaction_hash},
            )
        return self._capabilities

    @property
    def functions(self) -> Namespace:
        return self._require_capabilities().functions

    @property
    def events(self) -> Namespace:
        return self._require_capabilities().events

    @property
    def all_events(self) -> AllEvents:
        return self._require_capabilities().all_events

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not regular attributes
        if name.startswith("_"):
            raise AttributeError(name)
        capabilities = self.__dict__.get("_capabilities")
        if capabilities is not None:
            found = capabilities.lookup(name)
            if found is not None:
                return found
        raise AttributeError(f"{type(self).__name__} has no attribute or ABI member {name!r}")

    # ------------------------------------------------------------------
    # Deployment outcome
    # ------------------------------------------------------------------

    def _deployment_future(self) -> asyncio.Future:
        if self._deployment is None:
            self._deployment = asyncio.get_running_loop().create_future()
            if self._address is not None and self._transaction_hash is None:
                # Accessed via ``at``: nothing to wait for
                self._deployment.set_result(self)
        return self._deployment

    async def wait_for_deployment(self) -> ContractInstance:
        """
        Wait until the deployment reaches a terminal state.

        Returns:
            This instance, with address and capabilities rebound

        Raises:
            ConfirmationTimeout: If no receipt appeared within the block budget
            DeploymentFailed: If the transaction stored no code
        """
        return await asyncio.shield(self._deployment_future())

    def _settle(self, error: Optional[BaseException] = None, *, delivered: bool = False) -> None:
        """
        Record the terminal outcome for ``wait_for_deployment``.

        ``delivered`` marks an error that already reached a callback, so the
        future does not report it again as never retrieved.
        """
        future = self._deployment_future()
        if future.done():
            return
        if error is None:
            future.set_result(self)
            return
        future.set_exception(error)
        if delivered:
            future.exception()

    def __repr__(self) -> str:
        return (
            f"ContractInstance(address={self._address!r}, "
            f"transaction_hash={self._transaction_hash!r})"
        )
