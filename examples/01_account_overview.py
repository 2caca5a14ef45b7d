"""Example: Read balances and resources of an account on Movement testnet."""

from __future__ import annotations

import asyncio
import logging
import os

from dotenv import load_dotenv

from movebridge import Movement, MovementConfig, from_octas
from movebridge.constants import NATIVE_COIN_SYMBOL

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

DEFAULT_ACCOUNT = "0x1"


async def main() -> None:
    """Print the MOVE balance and resource types held by ACCOUNT_ADDRESS."""

    address = os.getenv("ACCOUNT_ADDRESS", DEFAULT_ACCOUNT)
    movement = Movement(MovementConfig.from_env())

    try:
        balance = await movement.get_account_balance(address)
        print(f"Network: {movement.network.value} ({movement.config.rpc_url})")
        print(f"Balance of {address}: {from_octas(balance)} {NATIVE_COIN_SYMBOL}")

        resources = await movement.get_account_resources(address)
        print(f"{len(resources)} resources:")
        for resource in resources:
            print(f"  - {resource.get('type')}")
    finally:
        movement.destroy()


if __name__ == "__main__":
    asyncio.run(main())
