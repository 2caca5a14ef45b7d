"""Type definitions and data models for the MoveBridge SDK."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from eth_typing import HexStr
from web3 import Web3

from .constants import ENTRY_FUNCTION_PAYLOAD

Address = str  # 0x-prefixed account address
Hash = str  # 0x-prefixed transaction hash
TypeTag = str  # Move type tag, e.g. "0x1::aptos_coin::AptosCoin"
SubscriptionId = str

# Loosely typed Move values accepted as view/entry arguments
MoveValue = Union[bool, int, str, bytes, Sequence["MoveValue"]]

EventCallback = Callable[["ContractEvent"], Any]

# Move integers wider than this are sent as decimal strings
_JSON_SAFE_INT = 2**53 - 1


@dataclass(frozen=True)
class WalletState:
    """Snapshot of the wallet connection."""

    connected: bool = False
    address: Address | None = None
    public_key: bytes | None = None


@dataclass(frozen=True)
class WalletAccount:
    """Account details returned by a wallet provider on connect."""

    address: Address
    public_key: bytes | str | None = None

    def public_key_bytes(self) -> bytes | None:
        if self.public_key is None:
            return None
        return ensure_bytes(self.public_key)


@dataclass(frozen=True)
class WalletInfo:
    """Display metadata for a wallet provider."""

    id: str
    name: str
    icon: str | None = None
    url: str | None = None
    installed: bool = False


@dataclass(frozen=True)
class TransactionPayload:
    """Entry-function payload; immutable once built."""

    function: str
    type_arguments: tuple[TypeTag, ...] = ()
    arguments: tuple[MoveValue, ...] = ()
    kind: str = "entry_function"

    def to_json(self) -> dict[str, Any]:
        """Return the payload in the fullnode REST wire format."""

        return {
            "type": ENTRY_FUNCTION_PAYLOAD,
            "function": self.function,
            "type_arguments": list(self.type_arguments),
            "arguments": [encode_move_value(arg) for arg in self.arguments],
        }


@dataclass(frozen=True)
class SignedTransaction:
    """Payload plus the wallet signature; consumed once by submit."""

    payload: TransactionPayload
    signature: bytes
    sender: Address
    public_key: bytes | None = None

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "sender": self.sender,
            "payload": self.payload.to_json(),
            "signature": Web3.to_hex(self.signature),
        }
        if self.public_key is not None:
            body["public_key"] = Web3.to_hex(self.public_key)
        return body


@dataclass(frozen=True)
class ContractEvent:
    """Event emitted by a Move module."""

    type: str
    sequence_number: str
    data: Mapping[str, Any] = field(default_factory=dict)

    @property
    def sequence(self) -> int:
        return int(self.sequence_number)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ContractEvent:
        sequence = data.get("sequence_number", data.get("sequenceNumber", "0"))
        return cls(
            type=str(data.get("type", "")),
            sequence_number=str(sequence),
            data=dict(data.get("data") or {}),
        )


@dataclass(frozen=True)
class TransactionResponse:
    """Finalised transaction; ``success`` reports the execution outcome."""

    hash: Hash
    success: bool
    vm_status: str
    gas_used: str
    events: tuple[ContractEvent, ...] = ()
    version: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TransactionResponse:
        return cls(
            hash=str(data["hash"]),
            success=bool(data.get("success", False)),
            vm_status=str(data.get("vm_status", "")),
            gas_used=str(data.get("gas_used", "0")),
            events=tuple(ContractEvent.from_dict(event) for event in data.get("events") or []),
            version=str(data["version"]) if data.get("version") is not None else None,
        )


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of a dry-run; a failed simulation is data, not an error."""

    success: bool
    gas_used: str
    vm_status: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SimulationResult:
        return cls(
            success=bool(data.get("success", False)),
            gas_used=str(data.get("gas_used", "0")),
            vm_status=str(data.get("vm_status", "")),
        )


@dataclass
class Subscription:
    """Registry entry owned by the event subscription engine.

    ``primed`` turns true once the first fetch has recorded where the stream
    stood at subscription time; events at or below that point are history.
    """

    id: SubscriptionId
    event_handle: str
    callback: EventCallback
    last_seen_sequence: str | None = None
    primed: bool = False

    def is_new(self, event: ContractEvent) -> bool:
        return self.last_seen_sequence is None or event.sequence > int(self.last_seen_sequence)

    def advance(self, sequence_number: str) -> None:
        """Move the cursor forward; never moves it backwards."""

        if self.last_seen_sequence is None or int(sequence_number) > int(self.last_seen_sequence):
            self.last_seen_sequence = str(int(sequence_number))

    def prime(self, existing: Sequence[ContractEvent]) -> None:
        for event in existing:
            self.advance(event.sequence_number)
        self.primed = True


def encode_move_value(value: Any) -> Any:
    """Convert a Python value into its JSON wire form for Move arguments."""

    if isinstance(value, bool):
        return value

    if isinstance(value, int):
        # u64/u128/u256 do not fit in JSON numbers
        return str(value) if abs(value) > _JSON_SAFE_INT else value

    if isinstance(value, str):
        return value

    if isinstance(value, bytes | bytearray):
        return Web3.to_hex(bytes(value))

    if isinstance(value, list | tuple):
        return [encode_move_value(item) for item in value]

    raise TypeError(f"Unsupported Move value type: {type(value)!r}")


def ensure_bytes(value: bytes | str) -> bytes:
    if isinstance(value, bytes):
        return value

    lower = value.lower()
    if lower.startswith("0x"):
        return Web3.to_bytes(hexstr=HexStr(lower))

    return value.encode("utf-8")
