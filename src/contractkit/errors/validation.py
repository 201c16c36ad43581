"""
Input validation exceptions for contractkit.

Note that constructor parameter type checks report mismatches as plain
strings (see ``contractkit.abi.type_family.validate_all``); the exceptions
here cover inputs that cannot be used at all.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from contractkit.errors.base import ContractKitError


class ValidationError(ContractKitError):
    """
    Raised when input validation fails.

    Example:
        >>> raise ValidationError("ABI must be a list of entries", field="abi")
    """

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        if field:
            details["field"] = field
        super().__init__(message, details=details)
        self.field = field


class InvalidAddressError(ValidationError):
    """Raised when an address is not 0x followed by 40 hex characters, or fails its checksum."""

    code = "INVALID_ADDRESS"

    def __init__(
        self,
        address: str,
        *,
        field: str = "address",
        reason: Optional[str] = None,
    ) -> None:
        message = f"Invalid {field}: {address!r}"
        if reason:
            message += f" ({reason})"

        super().__init__(message, field=field, details={"address": address, "reason": reason})
        self.address = address
        self.reason = reason
