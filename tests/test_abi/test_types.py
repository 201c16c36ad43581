"""
Tests for the ABI data model.

Tests cover:
- Parsing entries from JSON text and lists
- Payable detection (legacy flag and stateMutability)
- Defaults for entries without a type
- Tuple parameters
- Invalid input
"""

import json

import pytest

from contractkit.abi import AbiDescriptor, AbiEntry, AbiKind
from contractkit.errors import ValidationError

from ..conftest import TOKEN_ABI


class TestAbiEntry:
    """Tests for AbiEntry.from_json."""

    def test_function_entry(self) -> None:
        entry = AbiEntry.from_json(TOKEN_ABI[2])

        assert entry.kind is AbiKind.FUNCTION
        assert entry.name == "transfer"
        assert entry.input_types == ("address", "uint256")
        assert entry.output_types == ("bool",)
        assert entry.signature == "transfer(address,uint256)"
        assert entry.arity == 2
        assert entry.is_constant is False

    def test_view_function_is_constant(self) -> None:
        assert AbiEntry.from_json(TOKEN_ABI[1]).is_constant is True

    def test_missing_type_defaults_to_function(self) -> None:
        entry = AbiEntry.from_json({"name": "ping", "inputs": []})
        assert entry.kind is AbiKind.FUNCTION

    def test_legacy_payable_flag(self) -> None:
        entry = AbiEntry.from_json({"type": "constructor", "inputs": [], "payable": True})
        assert entry.payable is True

    def test_payable_state_mutability(self) -> None:
        entry = AbiEntry.from_json(
            {"type": "constructor", "inputs": [], "stateMutability": "payable"}
        )
        assert entry.payable is True

    def test_not_payable_by_default(self) -> None:
        entry = AbiEntry.from_json({"type": "constructor", "inputs": []})
        assert entry.payable is False

    def test_indexed_event_inputs(self) -> None:
        entry = AbiEntry.from_json(TOKEN_ABI[3])
        assert [p.indexed for p in entry.inputs] == [True, True, False]

    def test_tuple_input_expanded(self) -> None:
        entry = AbiEntry.from_json(
            {
                "type": "function",
                "name": "submit",
                "inputs": [
                    {
                        "name": "order",
                        "type": "tuple[]",
                        "components": [
                            {"name": "maker", "type": "address"},
                            {"name": "amount", "type": "uint256"},
                        ],
                    }
                ],
            }
        )
        assert entry.signature == "submit((address,uint256)[])"

    def test_entries_are_immutable(self) -> None:
        entry = AbiEntry.from_json(TOKEN_ABI[0])
        with pytest.raises(AttributeError):
            entry.payable = True  # type: ignore[misc]

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AbiEntry.from_json({"type": "modifier", "inputs": []})

    def test_parameter_without_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AbiEntry.from_json({"type": "function", "name": "f", "inputs": [{"name": "x"}]})


class TestAbiDescriptor:
    """Tests for AbiDescriptor."""

    def test_from_list(self) -> None:
        abi = AbiDescriptor.from_json(TOKEN_ABI)

        assert len(abi) == 5
        assert [e.name for e in abi.functions] == ["totalSupply", "transfer"]
        assert [e.name for e in abi.events] == ["Transfer", "Approval"]
        assert len(abi.constructors) == 1

    def test_from_json_text(self) -> None:
        abi = AbiDescriptor.from_json(json.dumps(TOKEN_ABI))
        assert abi[2].name == "transfer"

    def test_coerce_passes_descriptor_through(self) -> None:
        abi = AbiDescriptor.from_json(TOKEN_ABI)
        assert AbiDescriptor.coerce(abi) is abi

    def test_invalid_json(self) -> None:
        with pytest.raises(ValidationError, match="not valid JSON"):
            AbiDescriptor.from_json("[{")

    def test_not_a_list(self) -> None:
        with pytest.raises(ValidationError, match="list of entries"):
            AbiDescriptor.from_json({"type": "function"})

    def test_empty_abi(self) -> None:
        abi = AbiDescriptor.from_json([])
        assert len(abi) == 0
        assert abi.constructors == []
