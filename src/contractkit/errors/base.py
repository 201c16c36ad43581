"""
Root of the contractkit exception hierarchy.

Each subclass declares its machine-readable ``code`` as a class attribute,
so handlers can branch on ``error.code`` without importing every class.
Context known at the raising site goes into ``details``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ContractKitError(Exception):
    """
    Base exception for all contractkit errors.

    Attributes:
        code: Machine-readable error code, e.g. "NOT_BOUND"
        message: Human-readable description
        details: Context recorded where the error was raised

    Example:
        >>> raise ContractKitError("Contract address is already set", code="ADDRESS_ALREADY_SET")
    """

    code: str = "CONTRACTKIT_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details: Dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form for structured logs and API responses."""
        return {
            "error": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
        }
