"""
Transport backed by web3.py's asynchronous client.

Transactions are either signed locally with an eth-account key or handed
to the node for signing (``eth_sendTransaction``). Block notifications are
produced by polling the block number every ``poll_interval`` seconds.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import TransactionNotFound

from contractkit.config import FactoryConfig
from contractkit.constants import PROVIDER_TIMEOUT_SECONDS
from contractkit.transport.base import BlockHandler
from contractkit.utils.logging import get_logger
from contractkit.utils.retry import RetryConfig, retry_async

__all__ = ["Web3Transport", "BlockPollSubscription"]

_logger = get_logger(__name__)


class BlockPollSubscription:
    """
    Polls the latest block number and reports each new block to a handler.

    RPC errors while polling are reported to the handler and polling
    continues. An exception raised by the handler itself ends the poll
    loop; it is logged and re-raised by ``wait_closed``.
    """

    def __init__(self, w3: AsyncWeb3, handler: BlockHandler, poll_interval: float) -> None:
        self._w3 = w3
        self._handler = handler
        self._poll_interval = poll_interval
        self._stop_event = asyncio.Event()
        self._last_block: Optional[int] = None
        self._task = asyncio.get_running_loop().create_task(self._poll_loop())
        self._task.add_done_callback(self._loop_done)

    @property
    def active(self) -> bool:
        return not self._stop_event.is_set() and not self._task.done()

    def unsubscribe(self) -> None:
        self._stop_event.set()

    async def wait_closed(self) -> None:
        """Wait for the poll loop to end, re-raising a handler exception."""
        await self._task

    async def _poll_loop(self) -> None:
        _logger.debug("Starting block poll loop", extra={"interval_s": self._poll_interval})
        while not self._stop_event.is_set():
            while not self._stop_event.is_set():
                try:
                    block_hash = await self._next_block_hash()
                except Exception as e:
                    self._handler(e, None)
                    break
                if block_hash is None:
                    break
                # Outside the try: handler failures are not poll errors
                self._handler(None, block_hash)

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._poll_interval)
                break
            except asyncio.TimeoutError:
                continue
        _logger.debug("Block poll loop ended")

    async def _next_block_hash(self) -> Optional[str]:
        """Hash of the next unseen block, or None when caught up."""
        latest = await self._w3.eth.block_number
        if self._last_block is None:
            # First poll only establishes the starting point
            self._last_block = latest
            return None
        if latest <= self._last_block:
            return None

        block = await self._w3.eth.get_block(self._last_block + 1)
        self._last_block += 1
        return Web3.to_hex(block["hash"])

    def _loop_done(self, task: asyncio.Task) -> None:
        if task.cancelled() or task.exception() is None:
            return
        self._stop_event.set()
        _logger.error(
            "Block handler raised, polling stopped",
            extra={"error": repr(task.exception()), "last_block": self._last_block},
        )


class Web3Transport:
    """
    Transport over a JSON-RPC node.

    Example:
        ```python
        transport = Web3Transport(
            FactoryConfig(rpc_url="http://127.0.0.1:8545", chain_id=31337),
            private_key=os.environ["DEPLOYER_KEY"],
        )
        factory = ContractFactory(transport, abi, config=transport.config)
        ```
    """

    def __init__(
        self,
        config: Optional[FactoryConfig] = None,
        *,
        private_key: Optional[str] = None,
        w3: Optional[AsyncWeb3] = None,
        retry_config: Optional[RetryConfig] = None,
    ) -> None:
        self.config = config or FactoryConfig()
        self._w3 = w3 or AsyncWeb3(
            AsyncHTTPProvider(
                self.config.rpc_url,
                request_kwargs={"timeout": PROVIDER_TIMEOUT_SECONDS},
            )
        )
        self._account: Optional[LocalAccount] = (
            Account.from_key(private_key) if private_key else None
        )
        self._retry_config = retry_config or RetryConfig(
            retryable_errors=(ConnectionError, asyncio.TimeoutError, aiohttp.ClientError),
        )

    @property
    def w3(self) -> AsyncWeb3:
        return self._w3

    @property
    def address(self) -> Optional[str]:
        """Address of the local signing account, if any."""
        return self._account.address if self._account else None

    async def send_transaction(self, transaction: Dict[str, Any]) -> str:
        tx = dict(transaction)
        if self._account is None:
            tx_hash = await self._w3.eth.send_transaction(tx)
            return Web3.to_hex(tx_hash)

        tx.setdefault("from", self._account.address)
        tx.setdefault("gas", self.config.default_gas_limit)
        if "nonce" not in tx:
            tx["nonce"] = await self._w3.eth.get_transaction_count(
                self._account.address, "pending"
            )
        if "gasPrice" not in tx and "maxFeePerGas" not in tx:
            tx["gasPrice"] = await self._w3.eth.gas_price
        if "chainId" not in tx:
            tx["chainId"] = self.config.chain_id or await self._w3.eth.chain_id

        signed = self._account.sign_transaction(tx)
        tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        async def fetch() -> Optional[Dict[str, Any]]:
            try:
                return await self._w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                return None

        receipt = await retry_async(fetch, self._retry_config, operation="get_transaction_receipt")
        if receipt is None:
            return None
        return {
            "transactionHash": Web3.to_hex(receipt["transactionHash"]),
            "blockHash": Web3.to_hex(receipt["blockHash"]) if receipt.get("blockHash") else None,
            "blockNumber": receipt.get("blockNumber"),
            "contractAddress": receipt.get("contractAddress"),
            "status": receipt.get("status"),
        }

    async def get_code(self, address: str) -> str:
        code = await retry_async(
            lambda: self._w3.eth.get_code(Web3.to_checksum_address(address)),
            self._retry_config,
            operation="get_code",
        )
        return Web3.to_hex(code)

    async def call(self, transaction: Dict[str, Any], block: str = "latest") -> str:
        result = await retry_async(
            lambda: self._w3.eth.call(transaction, block),
            self._retry_config,
            operation="call",
        )
        return Web3.to_hex(result)

    async def get_logs(self, filter_params: Dict[str, Any]) -> List[Dict[str, Any]]:
        logs = await retry_async(
            lambda: self._w3.eth.get_logs(filter_params),
            self._retry_config,
            operation="get_logs",
        )
        return [dict(log) for log in logs]

    def subscribe_new_blocks(self, handler: BlockHandler) -> BlockPollSubscription:
        return BlockPollSubscription(self._w3, handler, self.config.poll_interval)
