"""Tests for movebridge.types utilities."""

from __future__ import annotations

import dataclasses

import pytest

from movebridge.types import (
    ContractEvent,
    SignedTransaction,
    Subscription,
    TransactionPayload,
    TransactionResponse,
    encode_move_value,
    ensure_bytes,
)


def test_payload_wire_format() -> None:
    payload = TransactionPayload(
        function="0x1::aptos_account::transfer_coins",
        type_arguments=("0x1::aptos_coin::AptosCoin",),
        arguments=("0x2", 2**64 - 1, b"\x01\x02", [True, 3]),
    )

    assert payload.to_json() == {
        "type": "entry_function_payload",
        "function": "0x1::aptos_account::transfer_coins",
        "type_arguments": ["0x1::aptos_coin::AptosCoin"],
        "arguments": ["0x2", "18446744073709551615", "0x0102", [True, 3]],
    }


def test_payload_is_immutable() -> None:
    payload = TransactionPayload(function="0x1::m::f")

    with pytest.raises(dataclasses.FrozenInstanceError):
        payload.function = "0x1::m::g"  # type: ignore[misc]


def test_encode_move_value_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        encode_move_value(1.5)


def test_signed_transaction_json_hex_encodes_bytes() -> None:
    signed = SignedTransaction(
        payload=TransactionPayload(function="0x1::m::f"),
        signature=b"\xaa\xbb",
        sender="0x1",
        public_key=b"\x01",
    )

    body = signed.to_json()
    assert body["signature"] == "0xaabb"
    assert body["public_key"] == "0x01"
    assert body["sender"] == "0x1"


def test_transaction_response_from_dict() -> None:
    response = TransactionResponse.from_dict(
        {
            "hash": "0xabc",
            "success": False,
            "vm_status": "Move abort",
            "gas_used": 12,
            "version": 99,
            "events": [{"type": "0x1::m::E", "sequence_number": "4", "data": {"x": 1}}],
        }
    )

    assert response.hash == "0xabc"
    assert response.success is False
    assert response.gas_used == "12"
    assert response.version == "99"
    assert response.events == (ContractEvent(type="0x1::m::E", sequence_number="4", data={"x": 1}),)


def test_subscription_cursor_only_moves_forward() -> None:
    subscription = Subscription(id="sub", event_handle="0x1::m::E", callback=lambda _e: None)

    subscription.advance("5")
    subscription.advance("3")
    assert subscription.last_seen_sequence == "5"
    assert subscription.is_new(ContractEvent(type="0x1::m::E", sequence_number="6"))
    assert not subscription.is_new(ContractEvent(type="0x1::m::E", sequence_number="5"))


def test_subscription_prime_records_stream_position() -> None:
    subscription = Subscription(id="sub", event_handle="0x1::m::E", callback=lambda _e: None)

    subscription.prime([ContractEvent(type="0x1::m::E", sequence_number=seq) for seq in ("9", "7")])

    assert subscription.primed
    assert subscription.last_seen_sequence == "9"


def test_ensure_bytes() -> None:
    assert ensure_bytes("0x0102") == b"\x01\x02"
    assert ensure_bytes(b"raw") == b"raw"
    assert ensure_bytes("text") == b"text"
