#!/usr/bin/env python3
"""
Example: Deploy a token contract against the in-memory ledger

This demonstrates both deployment styles:
- Awaited: ``factory.new`` returns after submission, then wait for confirmation
- Callback: ``callback(error, instance)`` fires on submission and on confirmation

Swap MockTransport for Web3Transport(FactoryConfig.from_env(), private_key=...)
to run against a real node.

Run this example:
    python examples/deploy_token.py
"""

import asyncio

from eth_abi import encode

from contractkit import ContractFactory, MockTransport
from contractkit.utils.logging import configure_logging

TOKEN_ABI = [
    {
        "type": "constructor",
        "inputs": [{"name": "supply", "type": "uint256"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "totalSupply",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
]

TOKEN_BYTECODE = "0x6080604052348015600f57600080fd5b50"
SUPPLY = 1_000_000


async def main() -> None:
    print("=" * 60)
    print("contractkit - Token deployment example")
    print("=" * 60)
    print()

    configure_logging("INFO")
    transport = MockTransport()
    factory = ContractFactory(transport, TOKEN_ABI)

    # ==========================================================================
    # AWAITED DEPLOYMENT
    # ==========================================================================

    print(f"Creation data: {factory.get_data(SUPPLY, {'data': TOKEN_BYTECODE})[:42]}...")

    token = await factory.new(SUPPLY, {"data": TOKEN_BYTECODE})
    print(f"Submitted: {token.transaction_hash}")

    await transport.mine()
    await token.wait_for_deployment()
    print(f"Deployed at: {token.address}")

    transport.set_call_result(
        token.address,
        token.functions.totalSupply.selector,
        "0x" + encode(["uint256"], [SUPPLY]).hex(),
    )
    print(f"totalSupply(): {await token.functions.totalSupply()}")
    print(f"Transfer topic: {token.events.Transfer.topic}")
    print()

    # ==========================================================================
    # CALLBACK DEPLOYMENT
    # ==========================================================================

    def on_deploy(error, instance) -> None:
        if error is not None:
            print(f"[callback] failed: {error}")
        elif instance.address is None:
            print(f"[callback] submitted: {instance.transaction_hash}")
        else:
            print(f"[callback] confirmed at: {instance.address}")

    second = await factory.new(SUPPLY, {"data": TOKEN_BYTECODE}, on_deploy)
    await factory.wait_idle()
    await transport.mine()
    await second.wait_for_deployment()

    # ==========================================================================
    # EXISTING CONTRACT
    # ==========================================================================

    existing = factory.at(token.address)
    print(f"Bound existing contract: {existing.address}")
    print(f"Parameter check: {factory.init_parameters(['uint256'], [SUPPLY])}")


if __name__ == "__main__":
    asyncio.run(main())
