"""
Tests for ContractFactory.new().

Tests cover:
- Argument parsing (constructor args, options, callback)
- Payability pre-flight check
- Creation data assembly
- Submission in both callback and awaited modes
- Submission failures
"""

import asyncio

import pytest
from eth_abi import encode

from contractkit import (
    ContractFactory,
    ContractInstance,
    DeploymentOptions,
    PayabilityViolation,
    TransactionSubmissionError,
)
from contractkit.errors import ContractKitError

from ..conftest import BYTECODE, OTHER_ADDRESS, OVERLOADED_ABI, VALID_ADDRESS


# =============================================================================
# Payability
# =============================================================================


class TestPayability:
    """Value may only be sent to payable constructors."""

    async def test_value_to_non_payable_constructor(self, factory, transport) -> None:
        with pytest.raises(PayabilityViolation) as exc_info:
            await factory.new(5, {"data": BYTECODE, "value": 10})

        assert exc_info.value.code == "PAYABILITY_VIOLATION"
        assert sum(transport.calls.values()) == 0

    async def test_raised_even_with_callback(self, factory, transport, recorder) -> None:
        with pytest.raises(PayabilityViolation):
            await factory.new(5, {"data": BYTECODE, "value": 10}, recorder)

        assert recorder.calls == []
        assert sum(transport.calls.values()) == 0

    async def test_value_without_matching_constructor(self, factory, transport) -> None:
        with pytest.raises(PayabilityViolation):
            await factory.new(1, 2, {"data": BYTECODE, "value": 1})
        assert sum(transport.calls.values()) == 0

    async def test_zero_value_allowed(self, factory, transport) -> None:
        await factory.new(5, {"data": BYTECODE, "value": 0})
        assert transport.calls["send_transaction"] == 1

    async def test_payable_overload_accepts_value(self, transport) -> None:
        factory = ContractFactory(transport, OVERLOADED_ABI)

        await factory.new(VALID_ADDRESS, 100, {"data": BYTECODE, "value": 5})

        assert transport.sent[0]["value"] == 5


# =============================================================================
# Creation data
# =============================================================================


class TestCreationData:
    """Encoded constructor arguments are appended to the bytecode."""

    async def test_arguments_appended(self, factory, transport) -> None:
        await factory.new(5, {"data": BYTECODE})

        assert transport.sent[0]["data"] == BYTECODE + encode(["uint256"], [5]).hex()

    async def test_no_matching_constructor_leaves_bytecode(self, factory, transport) -> None:
        await factory.new({"data": BYTECODE})

        assert transport.sent[0]["data"] == BYTECODE

    async def test_prefix_added_to_bare_bytecode(self, factory, transport) -> None:
        await factory.new(5, {"data": BYTECODE[2:]})

        assert transport.sent[0]["data"].startswith("0x6080")

    async def test_transport_fields_pass_through(self, factory, transport) -> None:
        await factory.new(5, {"data": BYTECODE, "from": OTHER_ADDRESS, "gas": 900_000})

        sent = transport.sent[0]
        assert sent["from"] == OTHER_ADDRESS
        assert sent["gas"] == 900_000
        assert sent["value"] == 0

    async def test_options_dataclass(self, factory, transport) -> None:
        await factory.new(5, DeploymentOptions(data=BYTECODE, extra={"gas": 1}))

        assert transport.sent[0]["gas"] == 1

    async def test_caller_options_not_mutated(self, factory) -> None:
        options = {"data": BYTECODE}
        await factory.new(5, options)

        assert options == {"data": BYTECODE}

    async def test_list_argument_is_not_options(self, transport) -> None:
        abi = [{"type": "constructor", "inputs": [{"name": "ids", "type": "uint256[]"}]}]
        factory = ContractFactory(transport, abi)

        await factory.new([1, 2, 3], {"data": BYTECODE})

        assert transport.sent[0]["data"] == BYTECODE + encode(["uint256[]"], [[1, 2, 3]]).hex()


# =============================================================================
# Submission without callback
# =============================================================================


class TestAwaitedSubmission:
    """Without a callback the transaction is submitted before new() returns."""

    async def test_transaction_hash_set(self, factory, transport) -> None:
        instance = await factory.new(5, {"data": BYTECODE})

        assert isinstance(instance, ContractInstance)
        assert instance.transaction_hash == transport.pending[0]
        assert instance.address is None
        assert transport.calls["subscribe_new_blocks"] == 1

    async def test_handles_bound_before_confirmation(self, factory) -> None:
        instance = await factory.new(5, {"data": BYTECODE})

        assert instance.functions.totalSupply.address is None
        with pytest.raises(ContractKitError, match="before the contract has an address"):
            await instance.functions.totalSupply()

    async def test_confirmed_after_mining(self, factory, transport) -> None:
        instance = await factory.new(5, {"data": BYTECODE})

        await transport.mine()
        deployed = await instance.wait_for_deployment()

        assert deployed is instance
        assert instance.address is not None
        assert instance.functions.totalSupply.address == instance.address

    async def test_submission_error_raised(self, factory, transport) -> None:
        transport.send_error = ConnectionError("connection refused")

        with pytest.raises(TransactionSubmissionError) as exc_info:
            await factory.new(5, {"data": BYTECODE})

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert transport.calls["subscribe_new_blocks"] == 0


# =============================================================================
# Submission with callback
# =============================================================================


class TestCallbackSubmission:
    """With a callback, new() returns at once and reports twice."""

    async def test_returns_before_submission(self, factory, recorder) -> None:
        instance = await factory.new(5, {"data": BYTECODE}, recorder)

        assert instance.transaction_hash is None
        assert recorder.calls == []

        await factory.wait_idle()
        assert instance.transaction_hash is not None

    async def test_first_call_is_optimistic(self, factory, recorder) -> None:
        instance = await factory.new(5, {"data": BYTECODE}, recorder)
        await factory.wait_idle()

        assert recorder.calls == [(None, instance)]
        assert instance.address is None

    async def test_second_call_on_confirmation(self, factory, transport, recorder) -> None:
        instance = await factory.new(5, {"data": BYTECODE}, recorder)
        await factory.wait_idle()

        await transport.mine()
        await instance.poller.wait_idle()

        assert recorder.calls == [(None, instance), (None, instance)]
        assert instance.address is not None

    async def test_submission_error_delivered(self, factory, transport, recorder) -> None:
        transport.send_error = ConnectionError("connection refused")

        instance = await factory.new(5, {"data": BYTECODE}, recorder)
        await factory.wait_idle()

        assert len(recorder.calls) == 1
        error, delivered = recorder.calls[0]
        assert isinstance(error, TransactionSubmissionError)
        assert delivered is None
        assert instance.transaction_hash is None
        assert transport.calls["subscribe_new_blocks"] == 0

        with pytest.raises(TransactionSubmissionError):
            await instance.wait_for_deployment()

    async def test_coroutine_callback(self, factory, transport) -> None:
        seen = []

        async def on_deploy(error, instance):
            await asyncio.sleep(0)
            seen.append((error, instance))

        instance = await factory.new(5, {"data": BYTECODE}, on_deploy)
        await factory.wait_idle()
        await transport.mine()
        await instance.poller.wait_idle()

        assert seen == [(None, instance), (None, instance)]
