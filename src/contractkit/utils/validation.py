"""
Validation utilities for contractkit.

Provides input checks for:
- Contract addresses
- Hex-encoded bytecode
- Transaction values

All validation functions raise ValidationError (or subclasses) on failure.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from web3 import Web3

from contractkit.constants import ADDRESS_PATTERN
from contractkit.errors import InvalidAddressError, ValidationError

_HEX_PATTERN = re.compile(r"^(0x)?[0-9a-fA-F]*$")


def validate_address(address: Any, field_name: str = "address") -> str:
    """
    Validate contract address format.

    Mixed-case addresses must carry a valid EIP-55 checksum.

    Args:
        address: Address to validate
        field_name: Field name for error messages

    Returns:
        The address, unchanged

    Raises:
        InvalidAddressError: If address is invalid
    """
    if not address:
        raise InvalidAddressError("", field=field_name, reason=f"{field_name} is required")

    if not isinstance(address, str):
        raise InvalidAddressError(
            str(address), field=field_name, reason=f"{field_name} must be a string"
        )

    if not re.match(ADDRESS_PATTERN, address):
        raise InvalidAddressError(
            address, field=field_name, reason="must be 0x followed by 40 hex characters"
        )

    if not Web3.is_address(address):
        raise InvalidAddressError(address, field=field_name, reason="bad checksum")

    return address


def normalize_hex(data: Optional[str], field_name: str = "data") -> str:
    """
    Normalize a hex string to carry a ``0x`` prefix.

    Args:
        data: Hex string with or without prefix; None means empty
        field_name: Field name for error messages

    Returns:
        0x-prefixed hex string

    Raises:
        ValidationError: If data contains non-hex characters
    """
    if data is None:
        return "0x"
    if isinstance(data, (bytes, bytearray)):
        return "0x" + bytes(data).hex()
    if not isinstance(data, str) or not _HEX_PATTERN.match(data):
        raise ValidationError(f"{field_name} must be a hex string", field=field_name)
    return data if data.startswith("0x") else "0x" + data


def validate_value(value: Any, field_name: str = "value") -> int:
    """
    Validate a transaction value (in wei).

    Args:
        value: Integer amount, or a decimal/hex string

    Returns:
        Value as integer

    Raises:
        ValidationError: If value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer", field=field_name)
    try:
        if isinstance(value, str):
            value_int = int(value, 16) if value.startswith("0x") else int(value)
        else:
            value_int = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer", field=field_name)

    if value_int < 0:
        raise ValidationError(f"{field_name} cannot be negative", field=field_name)
    return value_int
