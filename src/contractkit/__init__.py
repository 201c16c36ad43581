"""
contractkit - ABI-driven contract deployment for Python.

Quick Start:
    >>> import asyncio
    >>> from contractkit import ContractFactory, Web3Transport, FactoryConfig
    >>>
    >>> async def main():
    ...     transport = Web3Transport(FactoryConfig.from_env(), private_key="0x...")
    ...     factory = ContractFactory(transport, abi)
    ...     token = await factory.new(1_000_000, {"data": bytecode})
    ...     await token.wait_for_deployment()
    ...     print(f"Deployed at {token.address}")
    ...
    >>> asyncio.run(main())

Modules:
- `factory`: ContractFactory (new, at, get_data, init_parameters)
- `poller`: ConfirmationPoller, the bounded confirmation state machine
- `binder`: Bound functions and events attached to instances
- `abi`: ABI model, constructor encoding and loose type checks
- `transport`: Transport interface, Web3Transport and MockTransport
- `errors`: Exception hierarchy
- `utils`: Logging, retry and validation helpers
"""

from contractkit.version import __version__, __version_info__

# ABI
from contractkit.abi import (
    AbiDescriptor,
    AbiEntry,
    AbiKind,
    AbiParam,
    TypeFamily,
    classify,
    encode_constructor_params,
    find_constructor,
    matches,
    validate_all,
)

# Binding
from contractkit.binder import (
    AllEvents,
    BoundEvent,
    BoundFunction,
    CapabilitySet,
    Namespace,
    bind,
)

# Config
from contractkit.config import FactoryConfig

# Errors
from contractkit.errors import (
    ConfirmationTimeout,
    ContractKitError,
    DeploymentError,
    DeploymentFailed,
    InvalidAddressError,
    PayabilityViolation,
    TransactionSubmissionError,
    ValidationError,
)

# Factory
from contractkit.factory import ContractFactory, ParameterCheck
from contractkit.instance import ContractInstance, DeploymentOptions
from contractkit.poller import ConfirmationPoller, PollState, PollStatus

# Transports
from contractkit.transport import MockTransport, Transport, Web3Transport

__all__ = [
    # Version
    "__version__",
    "__version_info__",
    # Factory
    "ContractFactory",
    "ParameterCheck",
    "ContractInstance",
    "DeploymentOptions",
    "ConfirmationPoller",
    "PollState",
    "PollStatus",
    # ABI
    "AbiDescriptor",
    "AbiEntry",
    "AbiKind",
    "AbiParam",
    "TypeFamily",
    "classify",
    "matches",
    "validate_all",
    "encode_constructor_params",
    "find_constructor",
    # Binding
    "bind",
    "BoundFunction",
    "BoundEvent",
    "AllEvents",
    "Namespace",
    "CapabilitySet",
    # Config
    "FactoryConfig",
    # Transports
    "Transport",
    "Web3Transport",
    "MockTransport",
    # Errors
    "ContractKitError",
    "DeploymentError",
    "PayabilityViolation",
    "TransactionSubmissionError",
    "ConfirmationTimeout",
    "DeploymentFailed",
    "ValidationError",
    "InvalidAddressError",
]
