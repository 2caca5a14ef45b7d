"""Example: Follow deposit events on Movement testnet for a while."""

from __future__ import annotations

import asyncio
import logging
import os

from dotenv import load_dotenv

from movebridge import ContractEvent, Movement, MovementConfig

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

EVENT_HANDLE = os.getenv("EVENT_HANDLE", "0x1::coin::CoinDeposit")
RUN_SECONDS = float(os.getenv("RUN_SECONDS", "30"))


def on_event(event: ContractEvent) -> None:
    print(f"#{event.sequence_number} {event.type}: {event.data}")


async def main() -> None:
    movement = Movement(MovementConfig.from_env())

    subscription_id = movement.events.subscribe(EVENT_HANDLE, on_event)
    print(f"Subscribed {subscription_id} to {EVENT_HANDLE}; listening {RUN_SECONDS:.0f}s")

    try:
        await asyncio.sleep(RUN_SECONDS)
    finally:
        movement.events.unsubscribe(subscription_id)
        movement.destroy()


if __name__ == "__main__":
    asyncio.run(main())
