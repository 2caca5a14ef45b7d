"""Example: Connect a wallet, transfer MOVE and wait for confirmation.

Runs entirely against the in-memory network and wallet from
``movebridge.testing`` so it can be tried without funds or a browser wallet.
"""

from __future__ import annotations

import asyncio
import logging
import os

from dotenv import load_dotenv

from movebridge import Movement, MoveBridgeError, WalletEvent, to_octas
from movebridge.constants import NATIVE_COIN_SYMBOL
from movebridge.testing import MockNetworkClient, MockWalletProvider, fake_address

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

AMOUNT = "0.5"


async def main() -> None:
    network = MockNetworkClient(seed="demo")
    wallet = MockWalletProvider("razor", seed="demo")
    movement = Movement(network="testnet", wallets=[wallet], network_client=network)

    movement.wallet.on(WalletEvent.CONNECT, lambda event: print(f"Connected {event.address}"))
    movement.wallet.on(WalletEvent.DISCONNECT, lambda event: print(f"Disconnected ({event.reason})"))

    try:
        print(f"Detected wallets: {movement.wallet.detect_providers()}")
        await movement.wallet.connect("razor")

        payload = movement.transaction.transfer(to=fake_address("recipient"), amount=to_octas(AMOUNT))
        simulation = await movement.transaction.simulate(payload)
        print(f"Simulation: success={simulation.success} gas={simulation.gas_used}")

        tx_hash = await movement.transaction.sign_and_submit(payload)
        print(f"Submitted {AMOUNT} {NATIVE_COIN_SYMBOL}: {tx_hash}")

        result = await movement.wait_for_transaction(tx_hash)
        print(f"Confirmed: success={result.success} vm_status={result.vm_status}")

        await movement.wallet.disconnect()
    except MoveBridgeError as exc:
        print(f"❌ {exc}")
    finally:
        movement.destroy()


if __name__ == "__main__":
    asyncio.run(main())
