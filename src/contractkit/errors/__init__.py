"""
Exception hierarchy for contractkit.

    ContractKitError
    ├── DeploymentError
    │   ├── PayabilityViolation
    │   ├── TransactionSubmissionError
    │   ├── ConfirmationTimeout
    │   └── DeploymentFailed
    └── ValidationError
        └── InvalidAddressError
"""

from contractkit.errors.base import ContractKitError
from contractkit.errors.deployment import (
    ConfirmationTimeout,
    DeploymentError,
    DeploymentFailed,
    PayabilityViolation,
    TransactionSubmissionError,
)
from contractkit.errors.validation import InvalidAddressError, ValidationError

__all__ = [
    "ContractKitError",
    "DeploymentError",
    "PayabilityViolation",
    "TransactionSubmissionError",
    "ConfirmationTimeout",
    "DeploymentFailed",
    "ValidationError",
    "InvalidAddressError",
]
