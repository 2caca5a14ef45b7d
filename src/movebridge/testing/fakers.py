"""Deterministic fake data for tests and demos."""

from __future__ import annotations

import random
from collections.abc import Mapping
from typing import Any

from ..constants import NATIVE_COIN_DECIMALS
from ..types import ContractEvent, TransactionResponse


class Faker:
    """Seeded generator; the same seed always yields the same sequence."""

    def __init__(self, seed: int | str | None = None) -> None:
        self.seed = seed
        self._random = random.Random(seed)

    def fake_address(self) -> str:
        return f"0x{self._random.getrandbits(256):064x}"

    def fake_hash(self) -> str:
        return f"0x{self._random.getrandbits(256):064x}"

    def fake_public_key(self) -> bytes:
        return self._random.getrandbits(256).to_bytes(32, "big")

    def fake_signature(self) -> bytes:
        return self._random.getrandbits(512).to_bytes(64, "big")

    def fake_amount(self, minimum: int = 1, maximum: int = 1000 * 10**NATIVE_COIN_DECIMALS) -> str:
        return str(self._random.randint(minimum, maximum))

    def fake_event(
        self,
        event_type: str | None = None,
        sequence_number: int | str | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> ContractEvent:
        if event_type is None:
            event_type = f"{self.fake_address()}::module::FakeEvent"
        if sequence_number is None:
            sequence_number = self._random.randint(0, 10_000)
        if data is None:
            data = {"amount": self.fake_amount(), "account": self.fake_address()}
        return ContractEvent(type=event_type, sequence_number=str(sequence_number), data=dict(data))

    def fake_transaction_response(
        self,
        tx_hash: str | None = None,
        *,
        success: bool = True,
    ) -> TransactionResponse:
        return TransactionResponse(
            hash=tx_hash or self.fake_hash(),
            success=success,
            vm_status="Executed successfully" if success else "Move abort: EINSUFFICIENT_BALANCE",
            gas_used=str(self._random.randint(5, 2_000)),
            events=(),
            version=str(self._random.randint(1, 10**9)),
        )


def fake_address(seed: int | str | None = None) -> str:
    return Faker(seed).fake_address()


def fake_hash(seed: int | str | None = None) -> str:
    return Faker(seed).fake_hash()
