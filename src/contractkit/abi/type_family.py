"""
Loose type-family checks between ABI type tags and Python values.

The check only compares the broad family of a
value (sequence, text, number, boolean) with the family implied by the ABI
type tag. Numeric ranges, byte lengths and array element types are not
validated here; eth_abi rejects those at encoding time.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Sequence, Tuple, Type, Union

from contractkit.abi.encoder import find_constructor
from contractkit.abi.types import AbiDescriptor

__all__ = ["TypeFamily", "classify", "matches", "validate_all"]


class TypeFamily(Enum):
    ARRAY = "array"
    TEXT = "text"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    UNCONSTRAINED = "unconstrained"


# Tested in order; the first family whose markers appear in the tag wins.
_CLASSIFICATION_ORDER: Tuple[Tuple[TypeFamily, Tuple[str, ...]], ...] = (
    (TypeFamily.ARRAY, ("[",)),
    (TypeFamily.TEXT, ("address", "string")),
    (TypeFamily.NUMERIC, ("int",)),
    (TypeFamily.BOOLEAN, ("bool",)),
)

_ACCEPTED_TYPES: dict = {
    TypeFamily.ARRAY: (list, tuple, dict),
    TypeFamily.TEXT: (str,),
    TypeFamily.NUMERIC: (int, float),
    TypeFamily.BOOLEAN: (bool,),
}


def classify(abi_type: str) -> TypeFamily:
    """
    Classify an ABI type tag into its loose family.

    Example:
        >>> classify("uint256[]")
        <TypeFamily.ARRAY: 'array'>
        >>> classify("bytes32")
        <TypeFamily.UNCONSTRAINED: 'unconstrained'>
    """
    tag = abi_type.lower()
    for family, markers in _CLASSIFICATION_ORDER:
        if any(marker in tag for marker in markers):
            return family
    return TypeFamily.UNCONSTRAINED


def matches(abi_type: Optional[str], value: Any) -> bool:
    """
    Check whether ``value`` belongs to the family of ``abi_type``.

    An empty tag or a None value never matches. Unknown tags accept
    any other value.
    """
    if not abi_type or value is None:
        return False

    family = classify(abi_type)
    if family is TypeFamily.UNCONSTRAINED:
        return True

    accepted: Tuple[Type[Any], ...] = _ACCEPTED_TYPES[family]
    # bool is an int subclass; keep the numeric and boolean families apart
    if family is TypeFamily.NUMERIC and isinstance(value, bool):
        return False
    return isinstance(value, accepted)


def validate_all(
    abi: Union[AbiDescriptor, Sequence[Any]],
    types: Optional[Sequence[str]],
    params: Optional[Sequence[Any]],
) -> Optional[str]:
    """
    Check declared types and parameter values against the constructor.

    The constructor is the one the encoder would pick for ``len(params)``.
    Checking stops at the first mismatch. A trailing options mapping must
    be removed by the caller first.

    Args:
        abi: Contract ABI
        types: Caller-declared type tags, one per parameter
        params: Constructor parameter values

    Returns:
        None when everything matches, otherwise a description of the
        first mismatch
    """
    if types is None or params is None:
        return "Parameters or types are missing"

    descriptor = AbiDescriptor.coerce(abi)
    constructor = find_constructor(descriptor, len(params))
    if constructor is None:
        if not descriptor.constructors:
            # Implicit default constructor: nothing to check
            return None
        arities = sorted({c.arity for c in descriptor.constructors})
        return (
            f"Arity mismatch: no constructor takes {len(params)} parameters "
            f"(declared: {', '.join(str(a) for a in arities)})"
        )

    for i, abi_type in enumerate(constructor.input_types):
        declared = types[i] if i < len(types) else None
        if abi_type != declared:
            return f"Type mismatch: abi[{abi_type}] does not match types[{declared}]"
        if not matches(abi_type, params[i]):
            return f"Parameter mismatch: abi[{abi_type}] does not match parameters[{params[i]}]"
    return None
