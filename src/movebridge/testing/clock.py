"""Virtual time for driving polling loops deterministically."""

from __future__ import annotations

import asyncio


class VirtualClock:
    """Sleeping advances virtual time instantly but still yields to the loop."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self.current

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += seconds
        await asyncio.sleep(0)

    def advance(self, seconds: float) -> None:
        self.current += seconds
