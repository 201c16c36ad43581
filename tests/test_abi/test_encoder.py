"""
Tests for constructor overload selection and encoding.
"""

from eth_abi import encode

from contractkit.abi import AbiDescriptor, encode_constructor_params, find_constructor

from ..conftest import OVERLOADED_ABI, TOKEN_ABI, VALID_ADDRESS


class TestFindConstructor:
    """Tests for find_constructor."""

    def test_matches_by_arity(self) -> None:
        abi = AbiDescriptor.from_json(OVERLOADED_ABI)

        two = find_constructor(abi, 2)
        assert two is not None
        assert two.input_types == ("address", "uint256")

    def test_first_declared_wins_on_equal_arity(self) -> None:
        abi = AbiDescriptor.from_json(OVERLOADED_ABI)

        one = find_constructor(abi, 1)
        assert one is not None
        assert one.input_types == ("uint256",)

    def test_no_match(self) -> None:
        abi = AbiDescriptor.from_json(OVERLOADED_ABI)
        assert find_constructor(abi, 3) is None


class TestEncodeConstructorParams:
    """Tests for encode_constructor_params."""

    def test_single_constructor_matches_codec(self) -> None:
        assert encode_constructor_params(TOKEN_ABI, [5]) == encode(["uint256"], [5])

    def test_two_arguments(self) -> None:
        result = encode_constructor_params(OVERLOADED_ABI, [VALID_ADDRESS, 10])
        assert result == encode(["address", "uint256"], [VALID_ADDRESS, 10])

    def test_first_overload_used_even_if_types_differ(self) -> None:
        # The string overload is never chosen for one argument
        result = encode_constructor_params(OVERLOADED_ABI, [7])
        assert result == encode(["uint256"], [7])

    def test_no_constructor_gives_empty_payload(self) -> None:
        abi = [entry for entry in TOKEN_ABI if entry["type"] != "constructor"]
        assert encode_constructor_params(abi, []) == b""
        assert encode_constructor_params(abi, [1, 2]) == b""

    def test_arity_mismatch_gives_empty_payload(self) -> None:
        assert encode_constructor_params(TOKEN_ABI, [1, 2]) == b""

    def test_zero_argument_constructor(self) -> None:
        abi = [{"type": "constructor", "inputs": []}]
        assert encode_constructor_params(abi, []) == b""
