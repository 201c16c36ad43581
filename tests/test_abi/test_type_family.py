"""
Tests for loose type-family checks.

Tests cover:
- Classification priority order
- Value matching per family
- validate_all mismatch reporting (first mismatch wins)
"""

import pytest

from contractkit.abi import TypeFamily, classify, matches, validate_all

from ..conftest import OVERLOADED_ABI, TOKEN_ABI, VALID_ADDRESS


class TestClassify:
    """Tests for classify()."""

    @pytest.mark.parametrize(
        "abi_type, family",
        [
            ("uint256[]", TypeFamily.ARRAY),
            ("address[2]", TypeFamily.ARRAY),
            ("string[]", TypeFamily.ARRAY),
            ("address", TypeFamily.TEXT),
            ("string", TypeFamily.TEXT),
            ("uint8", TypeFamily.NUMERIC),
            ("int256", TypeFamily.NUMERIC),
            ("bool", TypeFamily.BOOLEAN),
            ("bytes32", TypeFamily.UNCONSTRAINED),
            ("bytes", TypeFamily.UNCONSTRAINED),
            ("UINT256", TypeFamily.NUMERIC),
        ],
    )
    def test_families(self, abi_type: str, family: TypeFamily) -> None:
        assert classify(abi_type) is family


class TestMatches:
    """Tests for matches()."""

    def test_address_accepts_text(self) -> None:
        assert matches("address", "0xabc") is True

    def test_uint_rejects_text(self) -> None:
        assert matches("uint256", "5") is False

    def test_uint_accepts_int(self) -> None:
        assert matches("uint256", 5) is True

    def test_zero_is_a_number(self) -> None:
        assert matches("uint256", 0) is True

    def test_uint_rejects_bool(self) -> None:
        assert matches("uint256", True) is False

    def test_bool_accepts_bool(self) -> None:
        assert matches("bool", False) is True

    def test_bool_rejects_int(self) -> None:
        assert matches("bool", 1) is False

    def test_array_accepts_sequences(self) -> None:
        assert matches("uint256[]", [1, 2]) is True
        assert matches("uint256[]", (1, 2)) is True

    def test_array_does_not_check_elements(self) -> None:
        assert matches("uint256[]", ["a", "b"]) is True

    def test_unconstrained_accepts_anything(self) -> None:
        assert matches("bytes32", b"\x00" * 32) is True
        assert matches("bytes32", 12) is True

    def test_none_never_matches(self) -> None:
        assert matches("bytes32", None) is False

    def test_empty_type_never_matches(self) -> None:
        assert matches("", 1) is False


class TestValidateAll:
    """Tests for validate_all()."""

    def test_valid(self) -> None:
        assert validate_all(TOKEN_ABI, ["uint256"], [5]) is None

    def test_missing_inputs(self) -> None:
        assert validate_all(TOKEN_ABI, None, [5]) == "Parameters or types are missing"
        assert validate_all(TOKEN_ABI, ["uint256"], None) == "Parameters or types are missing"

    def test_declared_type_mismatch(self) -> None:
        error = validate_all(TOKEN_ABI, ["uint128"], [5])
        assert error == "Type mismatch: abi[uint256] does not match types[uint128]"

    def test_value_mismatch(self) -> None:
        error = validate_all(TOKEN_ABI, ["uint256"], ["5"])
        assert error == "Parameter mismatch: abi[uint256] does not match parameters[5]"

    def test_first_mismatch_reported(self) -> None:
        # Both positions are wrong; the first one is reported
        error = validate_all(OVERLOADED_ABI, ["address", "uint256"], [1, "x"])
        assert error is not None
        assert "abi[address]" in error

    def test_uses_constructor_matching_arity(self) -> None:
        error = validate_all(OVERLOADED_ABI, ["address", "uint256"], [VALID_ADDRESS, 10])
        assert error is None

    def test_missing_declared_type(self) -> None:
        error = validate_all(OVERLOADED_ABI, ["address"], [VALID_ADDRESS, 10])
        assert error == "Type mismatch: abi[uint256] does not match types[None]"

    def test_no_constructor_for_arity(self) -> None:
        error = validate_all(TOKEN_ABI, ["uint256", "uint256"], [1, 2])
        assert error == "Arity mismatch: no constructor takes 2 parameters (declared: 1)"

    def test_missing_arguments_reported(self) -> None:
        error = validate_all(OVERLOADED_ABI, [], [])
        assert error == "Arity mismatch: no constructor takes 0 parameters (declared: 1, 2)"

    def test_implicit_constructor_takes_no_arguments(self) -> None:
        functions_only = [entry for entry in TOKEN_ABI if entry["type"] != "constructor"]
        assert validate_all(functions_only, [], []) is None
