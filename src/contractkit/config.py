"""
Configuration for contractkit.

FactoryConfig carries the confirmation bounds and transport defaults.
Values can be loaded from the environment (and a ``.env`` file):

    CONTRACTKIT_RPC_URL           RPC endpoint for Web3Transport
    CONTRACTKIT_CHAIN_ID          Chain id used when signing locally
    CONTRACTKIT_MAX_BLOCKS        Block ticks before ConfirmationTimeout
    CONTRACTKIT_POLL_INTERVAL     Seconds between block number polls
    CONTRACTKIT_GAS_LIMIT         Gas limit used when options omit "gas"
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from contractkit.constants import (
    DEFAULT_GAS_LIMIT,
    DEFAULT_POLL_INTERVAL_SECONDS,
    MAX_CONFIRMATION_BLOCKS,
    MIN_CODE_LENGTH,
)
from contractkit.errors import ValidationError

__all__ = ["FactoryConfig", "DEFAULT_RPC_URL"]

DEFAULT_RPC_URL = "http://127.0.0.1:8545"


@dataclass(frozen=True)
class FactoryConfig:
    """
    Settings shared by the factory, the poller and Web3Transport.

    Attributes:
        max_blocks: Block ticks allowed before a deployment times out
        min_code_length: Code strings of this length or shorter count as empty
        poll_interval: Seconds between block number polls (Web3Transport)
        default_gas_limit: Gas used when the deployment options carry none
        rpc_url: JSON-RPC endpoint
        chain_id: Chain id for locally signed transactions
    """

    max_blocks: int = MAX_CONFIRMATION_BLOCKS
    min_code_length: int = MIN_CODE_LENGTH
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    default_gas_limit: int = DEFAULT_GAS_LIMIT
    rpc_url: str = DEFAULT_RPC_URL
    chain_id: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_blocks < 1:
            raise ValidationError("max_blocks must be at least 1", field="max_blocks")
        if self.poll_interval <= 0:
            raise ValidationError("poll_interval must be positive", field="poll_interval")
        if self.default_gas_limit <= 0:
            raise ValidationError(
                "default_gas_limit must be positive", field="default_gas_limit"
            )

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> FactoryConfig:
        """
        Build a config from CONTRACTKIT_* environment variables.

        Args:
            dotenv_path: Optional .env file to load first (default: search cwd)

        Returns:
            FactoryConfig with defaults for unset variables
        """
        load_dotenv(dotenv_path)

        chain_id = os.environ.get("CONTRACTKIT_CHAIN_ID")
        try:
            return cls(
                max_blocks=int(
                    os.environ.get("CONTRACTKIT_MAX_BLOCKS", MAX_CONFIRMATION_BLOCKS)
                ),
                poll_interval=float(
                    os.environ.get(
                        "CONTRACTKIT_POLL_INTERVAL", DEFAULT_POLL_INTERVAL_SECONDS
                    )
                ),
                default_gas_limit=int(
                    os.environ.get("CONTRACTKIT_GAS_LIMIT", DEFAULT_GAS_LIMIT)
                ),
                rpc_url=os.environ.get("CONTRACTKIT_RPC_URL", DEFAULT_RPC_URL),
                chain_id=int(chain_id) if chain_id else None,
            )
        except ValueError as e:
            raise ValidationError(f"Invalid contractkit environment setting: {e}") from e
