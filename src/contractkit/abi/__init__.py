"""ABI model, constructor encoding and loose type checks."""

from contractkit.abi.encoder import encode_constructor_params, find_constructor
from contractkit.abi.type_family import TypeFamily, classify, matches, validate_all
from contractkit.abi.types import AbiDescriptor, AbiEntry, AbiKind, AbiParam

__all__ = [
    "AbiDescriptor",
    "AbiEntry",
    "AbiKind",
    "AbiParam",
    "encode_constructor_params",
    "find_constructor",
    "TypeFamily",
    "classify",
    "matches",
    "validate_all",
]
