"""
Constructor overload selection and argument encoding.

Only the signature selection lives here; byte packing is done by eth_abi.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

from eth_abi import encode

from contractkit.abi.types import AbiDescriptor, AbiEntry

__all__ = ["find_constructor", "encode_constructor_params"]


def find_constructor(abi: AbiDescriptor, arity: int) -> Optional[AbiEntry]:
    """
    Return the first constructor declaring exactly ``arity`` inputs.

    Overloads with the same arity are not told apart by type; the first
    one in declaration order is used.
    """
    for entry in abi.constructors:
        if entry.arity == arity:
            return entry
    return None


def encode_constructor_params(
    abi: Union[AbiDescriptor, Sequence[Any]],
    params: Sequence[Any],
) -> bytes:
    """
    Encode constructor arguments for the matching constructor.

    Args:
        abi: Contract ABI
        params: Constructor arguments

    Returns:
        ABI-encoded arguments, or ``b""`` when no constructor takes
        ``len(params)`` arguments
    """
    constructor = find_constructor(AbiDescriptor.coerce(abi), len(params))
    if constructor is None:
        return b""
    return encode(list(constructor.input_types), list(params))
