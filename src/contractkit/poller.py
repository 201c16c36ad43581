"""
Confirmation polling for contract deployments.

The poller counts block notifications after a deployment transaction was
submitted. On each block it looks for the receipt and, once mined, for the
code stored at the new contract address:

    WATCHING ──(code stored)──────────────> CONFIRMED
        │ ────(mined, no code)────────────> FAILED
        └─────(more than max_blocks ticks)> TIMED_OUT

Receipt and code lookups from successive blocks may overlap. A one-shot
latch, taken under a lock, guarantees a single terminal outcome and a single
unsubscribe no matter how those lookups interleave.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Set

from contractkit.binder import bind
from contractkit.config import FactoryConfig
from contractkit.errors import ConfirmationTimeout, DeploymentError, DeploymentFailed
from contractkit.instance import ContractInstance
from contractkit.transport.base import Subscription
from contractkit.utils.logging import get_logger

__all__ = [
    "PollStatus",
    "PollState",
    "ConfirmationPoller",
    "DeploymentCallback",
    "fire_callback",
    "invoke_callback",
]

_logger = get_logger(__name__)

# callback(error, instance); may be a coroutine function
DeploymentCallback = Callable[[Optional[BaseException], Optional[ContractInstance]], Any]


class PollStatus(Enum):
    WATCHING = "watching"
    CONFIRMED = "confirmed"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


@dataclass
class PollState:
    block_count: int = 0
    fired: bool = False
    status: PollStatus = PollStatus.WATCHING


async def invoke_callback(
    callback: DeploymentCallback,
    error: Optional[BaseException],
    instance: Optional[ContractInstance],
) -> None:
    result = callback(error, instance)
    if inspect.isawaitable(result):
        await result


def fire_callback(
    callback: DeploymentCallback,
    error: Optional[BaseException],
    instance: Optional[ContractInstance],
) -> Optional[asyncio.Future]:
    """Invoke ``callback`` from synchronous code; an awaitable result is scheduled and returned."""
    result = callback(error, instance)
    if inspect.isawaitable(result):
        return asyncio.ensure_future(result)
    return None


class ConfirmationPoller:
    """
    Watches new blocks until a deployment is confirmed, fails or times out.

    Without a callback, a failure is raised where it is detected and also
    set on the instance's deployment future.

    Example:
        >>> poller = ConfirmationPoller(instance, callback=on_done)
        >>> poller.start()
    """

    def __init__(
        self,
        instance: ContractInstance,
        callback: Optional[DeploymentCallback] = None,
        config: Optional[FactoryConfig] = None,
    ) -> None:
        if instance.transaction_hash is None:
            raise DeploymentError("Cannot poll for a deployment without a transaction hash")
        self._instance = instance
        self._callback = callback
        self._config = config or FactoryConfig()
        self._state = PollState()
        self._latch = threading.Lock()
        self._subscription: Optional[Subscription] = None
        self._inflight: Set[asyncio.Task] = set()

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def fired(self) -> bool:
        return self._state.fired

    def start(self) -> None:
        """Subscribe to new blocks. Must run inside the event loop."""
        if self._subscription is not None:
            return
        # Touch the future now so wait_for_deployment observes this attempt
        self._instance._deployment_future()
        _logger.debug(
            "Watching for contract deployment",
            extra={
                "tx_hash": self._instance.transaction_hash,
                "max_blocks": self._config.max_blocks,
            },
        )
        self._subscription = self._instance.transport.subscribe_new_blocks(self._on_block)

    async def wait_idle(self) -> None:
        """Wait for every in-flight receipt/code lookup to finish."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    def _track(self, task: asyncio.Future) -> None:
        self._inflight.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Future) -> None:
        self._inflight.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        # Deployment errors are already on the instance future
        if error is not None and not isinstance(error, DeploymentError):
            _logger.warning(
                "Deployment watch task failed",
                extra={"tx_hash": self._instance.transaction_hash, "error": repr(error)},
            )

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _try_fire(self, status: PollStatus) -> bool:
        """Take the latch; True for exactly one caller."""
        with self._latch:
            if self._state.fired:
                return False
            self._state.fired = True
            self._state.status = status
        if self._subscription is not None:
            self._subscription.unsubscribe()
        return True

    def _on_block(self, error: Optional[BaseException], block_hash: Optional[str]) -> None:
        if self._state.fired:
            return
        if error is not None:
            _logger.warning(
                "Block notification error",
                extra={"tx_hash": self._instance.transaction_hash, "error": str(error)},
            )
            return

        self._state.block_count += 1
        _logger.debug(
            "Block tick",
            extra={
                "tx_hash": self._instance.transaction_hash,
                "block_count": self._state.block_count,
                "block_hash": block_hash,
            },
        )
        if self._state.block_count > self._config.max_blocks:
            if self._try_fire(PollStatus.TIMED_OUT):
                self._fail(
                    ConfirmationTimeout(
                        self._config.max_blocks, tx_hash=self._instance.transaction_hash
                    )
                )
            return

        self._track(asyncio.get_running_loop().create_task(self._check_receipt()))

    async def _check_receipt(self) -> None:
        tx_hash = self._instance.transaction_hash
        receipt = await self._instance.transport.get_transaction_receipt(tx_hash)
        if not receipt or not receipt.get("blockHash") or self._state.fired:
            return

        address = receipt.get("contractAddress")
        try:
            code = await self._instance.transport.get_code(address) if address else None
        except Exception as e:
            # Not visible yet; the next block retries
            _logger.debug(
                "Code lookup failed, retrying on next block",
                extra={"tx_hash": tx_hash, "address": address, "error": str(e)},
            )
            return
        if not code:
            return

        if len(code) > self._config.min_code_length:
            if not self._try_fire(PollStatus.CONFIRMED):
                return
            self._instance.address = address
            bind(self._instance)
            _logger.info(
                "Contract deployed",
                extra={
                    "tx_hash": tx_hash,
                    "address": address,
                    "blocks": self._state.block_count,
                },
            )
            self._instance._settle()
            if self._callback is not None:
                await invoke_callback(self._callback, None, self._instance)
        else:
            if not self._try_fire(PollStatus.FAILED):
                return
            self._fail(DeploymentFailed(address, code=code, tx_hash=tx_hash))

    def _fail(self, error: DeploymentError) -> None:
        """Report a terminal error: to the callback if any, else raise it."""
        _logger.error(
            "Contract deployment did not complete",
            extra={
                "tx_hash": self._instance.transaction_hash,
                "code": error.code,
                "blocks": self._state.block_count,
            },
        )
        if self._callback is None:
            self._instance._settle(error)
            raise error

        self._instance._settle(error, delivered=True)
        pending = fire_callback(self._callback, error, None)
        if pending is not None:
            self._track(pending)
