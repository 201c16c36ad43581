"""Constants for contractkit.

This module defines the constant values used across the package,
including ABI encoding sizes, confirmation bounds, and transport defaults.
"""

# ABI Encoding Constants
ABI_SELECTOR_LENGTH = 4
ABI_WORD_LENGTH = 32

# Confirmation Constants
MAX_CONFIRMATION_BLOCKS = 50  # Block ticks to wait for a receipt before giving up
MIN_CODE_LENGTH = 3  # Hex code strings of this length or less ("0x", "0x0") mean no code

# Transport Constants
DEFAULT_GAS_LIMIT = 3_000_000
DEFAULT_POLL_INTERVAL_SECONDS = 1.0
PROVIDER_TIMEOUT_SECONDS = 30

# Address regex pattern: 0x followed by 40 hex chars
ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"

__all__ = [
    "ABI_SELECTOR_LENGTH",
    "ABI_WORD_LENGTH",
    "MAX_CONFIRMATION_BLOCKS",
    "MIN_CODE_LENGTH",
    "DEFAULT_GAS_LIMIT",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "PROVIDER_TIMEOUT_SECONDS",
    "ADDRESS_PATTERN",
]
