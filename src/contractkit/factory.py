"""
Contract factory: deployment orchestration and access to deployed contracts.

``ContractFactory.new`` takes constructor arguments, optionally followed by
deployment options (a mapping) and a callback, mirroring the way contract
constructors are usually invoked from scripts:

    instance = await factory.new(1000, "TKN", {"data": bytecode, "from": me})

Without a callback the deployment transaction is submitted before ``new``
returns, and failures are raised. With a callback, ``new`` returns at once;
the callback then receives ``(None, instance)`` when the transaction hash
is known and a second, terminal ``(error, None)`` or ``(None, instance)``
once the deployment is confirmed, fails, or times out.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Set, Tuple, Union

from eth_abi.exceptions import EncodingError

from contractkit.abi.encoder import encode_constructor_params, find_constructor
from contractkit.abi.type_family import validate_all
from contractkit.abi.types import AbiDescriptor
from contractkit.binder import bind
from contractkit.config import FactoryConfig
from contractkit.errors import PayabilityViolation, TransactionSubmissionError
from contractkit.instance import ContractInstance, DeploymentOptions
from contractkit.poller import (
    ConfirmationPoller,
    DeploymentCallback,
    fire_callback,
    invoke_callback,
)
from contractkit.transport.base import Transport
from contractkit.utils.logging import get_logger
from contractkit.utils.validation import validate_address

__all__ = ["ContractFactory", "ParameterCheck"]

_logger = get_logger(__name__)


@dataclass(frozen=True)
class ParameterCheck:
    """
    Outcome of ``ContractFactory.init_parameters``.

    Attributes:
        data: Hex-encoded constructor arguments when the check passed
        error: Description of the first mismatch otherwise
    """

    data: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _split_args(
    args: Sequence[Any],
    allow_callback: bool = True,
) -> Tuple[List[Any], DeploymentOptions, Optional[DeploymentCallback]]:
    """Split ``(*ctor_args, [options], [callback])``."""
    rest = list(args)
    callback = None
    if allow_callback and rest and callable(rest[-1]):
        callback = rest.pop()

    options = None
    if rest and isinstance(rest[-1], (Mapping, DeploymentOptions)):
        options = rest.pop()

    return rest, DeploymentOptions.coerce(options), callback


class ContractFactory:
    """
    Deploys contracts described by an ABI and binds existing ones.

    Example:
        >>> factory = ContractFactory(transport, abi)
        >>> token = await factory.new(1_000_000, {"data": bytecode})
        >>> await token.wait_for_deployment()
        >>> await token.functions.totalSupply()
        1000000
    """

    def __init__(
        self,
        transport: Transport,
        abi: Union[AbiDescriptor, str, bytes, Sequence[Any]],
        config: Optional[FactoryConfig] = None,
    ) -> None:
        self.transport = transport
        self.abi = AbiDescriptor.coerce(abi)
        self.config = config or FactoryConfig()
        self._tasks: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Deployment
    # ------------------------------------------------------------------

    async def new(self, *args: Any) -> ContractInstance:
        """
        Deploy a new contract.

        Args:
            *args: Constructor arguments, then optional deployment options
                (mapping or DeploymentOptions), then an optional callback
                ``callback(error, instance)``

        Returns:
            The contract instance; its address is set once deployment is
            confirmed (see ``ContractInstance.wait_for_deployment``)

        Raises:
            PayabilityViolation: If value is sent to a non-payable constructor
            TransactionSubmissionError: If the transport rejects the
                transaction and no callback was given
        """
        ctor_args, options, callback = _split_args(args)
        self._check_payable(ctor_args, options)
        options.append_data(encode_constructor_params(self.abi, ctor_args))

        instance = ContractInstance(self.transport, self.abi)
        # Handles carry no address until the deployment is confirmed
        bind(instance)
        _logger.info(
            "Submitting contract deployment",
            extra={
                "constructor_args": len(ctor_args),
                "value": options.value,
                "data_bytes": (len(options.data) - 2) // 2,
                "callback": callback is not None,
            },
        )

        if callback is None:
            await self._deploy(instance, options, None)
            return instance

        task = asyncio.get_running_loop().create_task(self._deploy(instance, options, callback))
        self._track(task)
        return instance

    async def wait_idle(self) -> None:
        """Wait for background submissions started in callback mode."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _track(self, task: asyncio.Future) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def get_data(self, *args: Any) -> str:
        """
        Creation data for a deployment without submitting it.

        Args:
            *args: Constructor arguments followed by optional options
                carrying the creation bytecode in ``data``

        Returns:
            0x-prefixed bytecode with the encoded constructor arguments appended
        """
        ctor_args, options, _ = _split_args(args, allow_callback=False)
        options.append_data(encode_constructor_params(self.abi, ctor_args))
        return options.data

    def init_parameters(self, types: Optional[Sequence[str]], params: Optional[Sequence[Any]]) -> ParameterCheck:
        """
        Check constructor parameters against the ABI and encode them.

        A trailing mapping in ``params`` is treated as options and removed
        before the parameters are checked.

        Args:
            types: Declared type tags, one per parameter
            params: Parameter values

        Returns:
            ParameterCheck with the encoded arguments, or with the first
            mismatch found (including values the encoder rejects)
        """
        ctor_args = None if params is None else list(params)
        if ctor_args and isinstance(ctor_args[-1], (Mapping, DeploymentOptions)):
            ctor_args.pop()

        error = validate_all(self.abi, types, ctor_args)
        if error is not None:
            return ParameterCheck(error=error)

        try:
            encoded = encode_constructor_params(self.abi, ctor_args)
        except EncodingError as e:
            return ParameterCheck(error=f"Encoding failed: {e}")
        return ParameterCheck(data="0x" + encoded.hex())

    def _check_payable(self, ctor_args: Sequence[Any], options: DeploymentOptions) -> None:
        if options.value <= 0:
            return
        constructor = find_constructor(self.abi, len(ctor_args))
        if constructor is None or not constructor.payable:
            raise PayabilityViolation(options.value, arity=len(ctor_args))

    async def _deploy(
        self,
        instance: ContractInstance,
        options: DeploymentOptions,
        callback: Optional[DeploymentCallback],
    ) -> None:
        try:
            tx_hash = await self.transport.send_transaction(options.to_transaction())
        except Exception as e:
            error = TransactionSubmissionError(e)
            _logger.error("Deployment transaction rejected", extra={"error": str(e)})
            if callback is None:
                raise error from e
            instance._settle(error, delivered=True)
            await invoke_callback(callback, error, None)
            return

        instance.transaction_hash = tx_hash
        _logger.info("Deployment transaction submitted", extra={"tx_hash": tx_hash})

        if callback is not None:
            await invoke_callback(callback, None, instance)

        instance.poller = ConfirmationPoller(instance, callback, self.config)
        instance.poller.start()

    # ------------------------------------------------------------------
    # Existing contracts
    # ------------------------------------------------------------------

    def at(
        self,
        address: str,
        callback: Optional[DeploymentCallback] = None,
    ) -> ContractInstance:
        """
        Bind to a contract that is already deployed.

        No transport call is made; functions and events are bound at once.

        Args:
            address: Contract address
            callback: Optional ``callback(None, instance)``, invoked once

        Returns:
            The bound contract instance
        """
        instance = ContractInstance(self.transport, self.abi, validate_address(address))
        bind(instance)

        if callback is not None:
            pending = fire_callback(callback, None, instance)
            if pending is not None:
                self._track(pending)
        return instance

    def __repr__(self) -> str:
        return f"ContractFactory(abi={self.abi!r})"
