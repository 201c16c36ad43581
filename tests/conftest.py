"""
Shared fixtures for contractkit tests.
"""

import pytest

from contractkit import AbiDescriptor, ContractFactory, FactoryConfig, MockTransport


# =============================================================================
# Test Constants
# =============================================================================

# Lowercase addresses pass without an EIP-55 checksum
VALID_ADDRESS = "0x" + "1" * 40
OTHER_ADDRESS = "0x" + "ab" * 20

# Creation bytecode (not executed by the mock ledger)
BYTECODE = "0x6080604052348015600f57600080fd5b50"

TOKEN_ABI = [
    {
        "type": "constructor",
        "inputs": [{"name": "supply", "type": "uint256"}],
        "payable": False,
    },
    {
        "type": "function",
        "name": "totalSupply",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "transfer",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "event",
        "name": "Transfer",
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
        "anonymous": False,
    },
    {
        "type": "event",
        "name": "Approval",
        "inputs": [
            {"name": "owner", "type": "address", "indexed": True},
            {"name": "spender", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
        "anonymous": False,
    },
]

OVERLOADED_ABI = [
    {"type": "constructor", "inputs": [{"name": "a", "type": "uint256"}]},
    {"type": "constructor", "inputs": [{"name": "a", "type": "string"}]},
    {
        "type": "constructor",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "cap", "type": "uint256"},
        ],
        "stateMutability": "payable",
    },
]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def token_abi() -> AbiDescriptor:
    return AbiDescriptor.from_json(TOKEN_ABI)


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def config() -> FactoryConfig:
    return FactoryConfig()


@pytest.fixture
def factory(transport, token_abi, config) -> ContractFactory:
    return ContractFactory(transport, token_abi, config=config)


class CallbackRecorder:
    """Callable collecting ``(error, instance)`` pairs."""

    def __init__(self) -> None:
        self.calls = []

    def __call__(self, error, instance):
        self.calls.append((error, instance))

    @property
    def errors(self):
        return [e for e, _ in self.calls if e is not None]


@pytest.fixture
def recorder() -> CallbackRecorder:
    return CallbackRecorder()
