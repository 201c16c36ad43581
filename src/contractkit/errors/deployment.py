"""
Deployment-related exceptions for contractkit.

These exceptions are raised (or delivered to a deployment callback) while a
contract creation transaction is submitted and confirmed. Once the
transaction hash is known it travels with the error.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from contractkit.errors.base import ContractKitError


class DeploymentError(ContractKitError):
    """
    Base exception for deployment operations.

    Example:
        >>> raise DeploymentError("Deployment aborted", tx_hash="0xabc...")
    """

    code = "DEPLOYMENT_ERROR"

    def __init__(
        self,
        message: str,
        *,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.tx_hash = tx_hash

    def __str__(self) -> str:
        text = super().__str__()
        if self.tx_hash:
            text += f" (tx: {self.tx_hash[:10]}...)"
        return text

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["tx_hash"] = self.tx_hash
        return data


class PayabilityViolation(DeploymentError):
    """
    Raised when value is sent to a constructor that is not payable.

    Always raised synchronously, before any transport call.
    """

    code = "PAYABILITY_VIOLATION"

    def __init__(self, value: int, *, arity: int) -> None:
        super().__init__(
            "Cannot send value to non-payable constructor",
            details={"value": value, "arity": arity},
        )
        self.value = value
        self.arity = arity


class TransactionSubmissionError(DeploymentError):
    """
    Raised when the transport rejects the deployment transaction.

    The original transport error is kept as ``__cause__`` and as ``cause``.
    """

    code = "TRANSACTION_SUBMISSION_FAILED"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(
            f"Deployment transaction was rejected: {cause}",
            details={"cause": f"{cause.__class__.__name__}: {cause}"},
        )
        self.cause = cause
        self.__cause__ = cause


class ConfirmationTimeout(DeploymentError):
    """Raised when no valid receipt is seen within the block budget."""

    code = "CONFIRMATION_TIMEOUT"

    def __init__(self, max_blocks: int, *, tx_hash: Optional[str] = None) -> None:
        super().__init__(
            f"Contract transaction couldn't be found after {max_blocks} blocks",
            tx_hash=tx_hash,
            details={"max_blocks": max_blocks},
        )
        self.max_blocks = max_blocks


class DeploymentFailed(DeploymentError):
    """
    Raised when the transaction was mined but no contract code was stored.

    This almost always means the creation transaction ran out of gas.

    Example:
        >>> raise DeploymentFailed("0x1234...", code="0x", tx_hash="0xabc...")
    """

    code = "DEPLOYMENT_FAILED"

    def __init__(
        self,
        address: Optional[str],
        *,
        code: str = "",
        tx_hash: Optional[str] = None,
    ) -> None:
        super().__init__(
            "The contract code couldn't be stored, please check your gas amount.",
            tx_hash=tx_hash,
            details={"address": address, "code_length": len(code)},
        )
        self.address = address
