from __future__ import annotations

import asyncio
from typing import Any

import pytest
import requests

from movebridge.config import MovementConfig, Network
from movebridge.exceptions import NetworkError
from movebridge.network import RestNetworkClient
from movebridge.types import SignedTransaction, TransactionPayload

RPC = "https://testnet.bardock.movementnetwork.xyz/v1"
INDEXER = "https://indexer.testnet.movementnetwork.xyz/v1/graphql"


class DummyResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class DummySession(requests.Session):
    def __init__(self, responses: list[Any]) -> None:
        super().__init__()
        self._responses = list(responses)
        self.requests: list[tuple[str, str, Any]] = []

    def request(self, method, url, *args, **kwargs):  # type: ignore[override]
        self.requests.append((method, url, kwargs.get("json")))
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


def make_client(*responses: Any, network: Network = Network.TESTNET) -> tuple[RestNetworkClient, DummySession]:
    session = DummySession(list(responses))
    return RestNetworkClient(MovementConfig(network=network), session=session), session


def test_missing_transaction_is_none() -> None:
    client, session = make_client(DummyResponse(404, {"error_code": "transaction_not_found"}))

    assert asyncio.run(client.get_transaction_by_hash("0xabc")) is None
    assert session.requests == [("GET", f"{RPC}/transactions/by_hash/0xabc", None)]


def test_http_error_carries_status_and_body() -> None:
    client, _ = make_client(DummyResponse(500, text="upstream unavailable"))

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(client.get_account_resources("0x1"))

    assert excinfo.value.status_code == 500
    assert excinfo.value.endpoint == f"{RPC}/accounts/0x1/resources"
    assert excinfo.value.details["body"] == "upstream unavailable"


def test_transport_error_becomes_network_error() -> None:
    client, _ = make_client(requests.ConnectionError("connection refused"))

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(client.get_account_modules("0x1"))

    assert excinfo.value.status_code is None
    assert "connection refused" in excinfo.value.details["error"]


def test_invalid_json_becomes_network_error() -> None:
    client, _ = make_client(DummyResponse(200, None, text="<html>"))

    with pytest.raises(NetworkError):
        asyncio.run(client.get_account_resources("0x1"))


def test_view_encodes_arguments() -> None:
    client, session = make_client(DummyResponse(200, ["5"]))

    result = asyncio.run(client.view("0x1::m::f", ["0x1::aptos_coin::AptosCoin"], [2**64, b"\x01\x02"]))

    assert result == ["5"]
    method, url, body = session.requests[0]
    assert (method, url) == ("POST", f"{RPC}/view")
    assert body == {
        "function": "0x1::m::f",
        "type_arguments": ["0x1::aptos_coin::AptosCoin"],
        "arguments": [str(2**64), "0x0102"],
    }


def test_balance_reads_coin_view() -> None:
    client, session = make_client(DummyResponse(200, ["150000000"]))

    assert asyncio.run(client.get_account_balance("0x1")) == "150000000"
    assert session.requests[0][2]["function"] == "0x1::coin::balance"


def test_submit_returns_hash() -> None:
    client, session = make_client(DummyResponse(202, {"hash": "0xfeed"}))
    signed = SignedTransaction(
        payload=TransactionPayload(function="0x1::m::f"),
        signature=b"\x00" * 64,
        sender="0x1",
        public_key=b"\x11" * 32,
    )

    assert asyncio.run(client.submit_transaction(signed)) == "0xfeed"
    assert session.requests[0][1] == f"{RPC}/transactions"


def test_submit_without_hash_fails() -> None:
    client, _ = make_client(DummyResponse(202, {"message": "accepted"}))
    signed = SignedTransaction(
        payload=TransactionPayload(function="0x1::m::f"),
        signature=b"\x00" * 64,
        sender="0x1",
        public_key=None,
    )

    with pytest.raises(NetworkError):
        asyncio.run(client.submit_transaction(signed))


def test_simulate_unwraps_list() -> None:
    client, session = make_client(
        DummyResponse(200, {"sequence_number": "7", "authentication_key": "0x1"}),
        DummyResponse(200, [{"success": False, "vm_status": "abort"}]),
    )

    result = asyncio.run(client.simulate_transaction(TransactionPayload(function="0x1::m::f"), "0x1"))

    assert result == {"success": False, "vm_status": "abort"}
    account, simulate = session.requests
    assert account[:2] == ("GET", f"{RPC}/accounts/0x1")
    assert simulate[1].startswith(f"{RPC}/transactions/simulate?")
    assert simulate[2]["sender"] == "0x1"
    assert simulate[2]["sequence_number"] == "7"


def test_simulate_builds_placeholder_envelope_without_wallet() -> None:
    client, session = make_client(
        DummyResponse(404, {"error_code": "account_not_found"}),
        DummyResponse(200, [{"success": True, "gas_used": "9", "vm_status": "Executed successfully"}]),
    )

    asyncio.run(client.simulate_transaction(TransactionPayload(function="0x1::m::f", arguments=(1,))))

    body = session.requests[1][2]
    assert body["sender"] == "0x" + "0" * 64
    assert body["sequence_number"] == "0"
    assert body["payload"]["function"] == "0x1::m::f"
    assert int(body["max_gas_amount"]) > 0
    assert int(body["gas_unit_price"]) > 0
    assert int(body["expiration_timestamp_secs"]) > 0
    assert body["signature"] == {
        "type": "ed25519_signature",
        "public_key": "0x" + "00" * 32,
        "signature": "0x" + "00" * 64,
    }


def test_simulate_uses_connected_public_key() -> None:
    client, session = make_client(
        DummyResponse(200, {"sequence_number": "2"}),
        DummyResponse(200, [{"success": True}]),
    )

    asyncio.run(
        client.simulate_transaction(
            TransactionPayload(function="0x1::m::f"), "0x1", public_key=b"\x11" * 32
        )
    )

    signature = session.requests[1][2]["signature"]
    assert signature["public_key"] == "0x" + "11" * 32
    assert signature["signature"] == "0x" + "00" * 64


def test_events_query_uses_cursor() -> None:
    events = [{"type": "0x1::m::E", "sequence_number": "8", "data": {}}]
    client, session = make_client(
        DummyResponse(200, {"data": {"events": []}}),
        DummyResponse(200, {"data": {"events": events}}),
    )

    assert asyncio.run(client.get_events("0x1::m::E")) == []
    assert asyncio.run(client.get_events("0x1::m::E", after="7", limit=10)) == events

    latest, after = session.requests
    assert latest[1] == INDEXER
    assert "desc" in latest[2]["query"]
    assert after[2]["variables"] == {"type": "0x1::m::E", "after": "7", "limit": 10}


def test_events_query_errors() -> None:
    client, _ = make_client(DummyResponse(200, {"errors": [{"message": "bad field"}]}))

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(client.get_events("0x1::m::E"))
    assert excinfo.value.details["errors"] == [{"message": "bad field"}]


def test_events_require_indexer() -> None:
    client, session = make_client(network=Network.DEVNET)

    with pytest.raises(NetworkError):
        asyncio.run(client.get_events("0x1::m::E"))
    assert session.requests == []
