"""Network API used by the SDK: fullnode REST plus indexer GraphQL."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import Any, Protocol
from urllib.parse import quote

import requests
from web3 import Web3

from .config import MovementConfig
from .constants import (
    DEFAULT_EVENT_PAGE_SIZE,
    ED25519_SIGNATURE,
    NATIVE_COIN_TYPE,
    SIMULATION_EXPIRATION_SECS,
    SIMULATION_GAS_UNIT_PRICE,
    SIMULATION_MAX_GAS_AMOUNT,
    SIMULATION_SENDER,
)
from .exceptions import NetworkError
from .types import SignedTransaction, TransactionPayload, encode_move_value

logger = logging.getLogger(__name__)

_EVENTS_AFTER_QUERY = """
query EventsAfter($type: String!, $after: bigint!, $limit: Int!) {
  events(
    where: {type: {_eq: $type}, sequence_number: {_gt: $after}}
    order_by: {sequence_number: asc}
    limit: $limit
  ) {
    type
    sequence_number
    data
  }
}
"""

_LATEST_EVENTS_QUERY = """
query LatestEvents($type: String!, $limit: Int!) {
  events(
    where: {type: {_eq: $type}}
    order_by: {sequence_number: desc}
    limit: $limit
  ) {
    type
    sequence_number
    data
  }
}
"""


class NetworkClient(Protocol):
    """Operations the SDK consumes from the chain."""

    async def get_account_resources(self, address: str) -> list[dict[str, Any]]: ...

    async def get_account_resource(
        self, address: str, resource_type: str
    ) -> dict[str, Any] | None: ...

    async def get_account_balance(self, address: str, coin_type: str = NATIVE_COIN_TYPE) -> str: ...

    async def get_account_modules(self, address: str) -> list[dict[str, Any]]: ...

    async def get_transaction_by_hash(self, tx_hash: str) -> dict[str, Any] | None:
        """Return the transaction, or ``None`` while the node does not know it."""
        ...

    async def submit_transaction(self, signed: SignedTransaction) -> str: ...

    async def simulate_transaction(
        self,
        payload: TransactionPayload,
        sender: str | None = None,
        public_key: bytes | None = None,
    ) -> dict[str, Any]: ...

    async def view(
        self, function: str, type_arguments: Sequence[str], arguments: Sequence[Any]
    ) -> list[Any]: ...

    async def get_events(
        self, event_handle: str, after: str | None = None, limit: int = DEFAULT_EVENT_PAGE_SIZE
    ) -> list[dict[str, Any]]:
        """Events of ``event_handle`` with sequence numbers above ``after``.

        Without a cursor only the most recent page is returned.
        """
        ...


class RestNetworkClient:
    """``NetworkClient`` backed by a ``requests.Session``.

    Each blocking HTTP call runs in a worker thread so the event loop keeps
    servicing wallet notifications and polling ticks.
    """

    def __init__(
        self,
        config: MovementConfig,
        session: requests.Session | None = None,
    ) -> None:
        self._config = config.with_defaulted_urls()
        self._session = session or requests.Session()
        self._session.headers.setdefault("Content-Type", "application/json")

    @property
    def rpc_url(self) -> str:
        return str(self._config.rpc_url)

    @property
    def indexer_url(self) -> str | None:
        return self._config.indexer_url

    @property
    def session(self) -> requests.Session:
        return self._session

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------
    async def get_account_resources(self, address: str) -> list[dict[str, Any]]:
        return await self._get(f"/accounts/{address}/resources")

    async def get_account_resource(self, address: str, resource_type: str) -> dict[str, Any] | None:
        path = f"/accounts/{address}/resource/{quote(resource_type, safe='')}"
        return await self._get(path, allow_missing=True)

    async def get_account_balance(self, address: str, coin_type: str = NATIVE_COIN_TYPE) -> str:
        result = await self.view("0x1::coin::balance", [coin_type], [address])
        return str(result[0]) if result else "0"

    async def get_account_modules(self, address: str) -> list[dict[str, Any]]:
        return await self._get(f"/accounts/{address}/modules")

    async def _sequence_number(self, address: str) -> str:
        account = await self._get(f"/accounts/{address}", allow_missing=True)
        if not account:
            return "0"
        return str(account.get("sequence_number", "0"))

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    async def get_transaction_by_hash(self, tx_hash: str) -> dict[str, Any] | None:
        return await self._get(f"/transactions/by_hash/{tx_hash}", allow_missing=True)

    async def submit_transaction(self, signed: SignedTransaction) -> str:
        result = await self._post("/transactions", signed.to_json())
        tx_hash = result.get("hash") if isinstance(result, dict) else None
        if not tx_hash:
            raise NetworkError(
                "Submission response did not include a transaction hash",
                endpoint=self._url("/transactions"),
                details={"response": result},
            )
        return str(tx_hash)

    async def simulate_transaction(
        self,
        payload: TransactionPayload,
        sender: str | None = None,
        public_key: bytes | None = None,
    ) -> dict[str, Any]:
        """Dry-run ``payload`` under a zeroed signature.

        Without a sender a placeholder account is used; without a public key
        the signature envelope carries a zero key.
        """

        sender = sender or SIMULATION_SENDER
        body = {
            "sender": sender,
            "sequence_number": await self._sequence_number(sender),
            "max_gas_amount": str(SIMULATION_MAX_GAS_AMOUNT),
            "gas_unit_price": str(SIMULATION_GAS_UNIT_PRICE),
            "expiration_timestamp_secs": str(int(time.time()) + SIMULATION_EXPIRATION_SECS),
            "payload": payload.to_json(),
            # The node refuses to simulate anything carrying a valid signature
            "signature": {
                "type": ED25519_SIGNATURE,
                "public_key": Web3.to_hex(public_key or bytes(32)),
                "signature": Web3.to_hex(bytes(64)),
            },
        }
        result = await self._post(
            "/transactions/simulate?estimate_gas_unit_price=true&estimate_max_gas_amount=true",
            body,
        )
        # The simulate endpoint answers with a one-element list
        if isinstance(result, list):
            return result[0] if result else {}
        return result

    async def view(
        self, function: str, type_arguments: Sequence[str], arguments: Sequence[Any]
    ) -> list[Any]:
        body = {
            "function": function,
            "type_arguments": list(type_arguments),
            "arguments": [encode_move_value(arg) for arg in arguments],
        }
        result = await self._post("/view", body)
        return list(result or [])

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    async def get_events(
        self, event_handle: str, after: str | None = None, limit: int = DEFAULT_EVENT_PAGE_SIZE
    ) -> list[dict[str, Any]]:
        if not self.indexer_url:
            raise NetworkError(
                "Event queries require an indexer URL",
                endpoint=None,
                details={"network": self._config.network.value},
            )

        if after is None:
            query = _LATEST_EVENTS_QUERY
            variables: dict[str, Any] = {"type": event_handle, "limit": limit}
        else:
            query = _EVENTS_AFTER_QUERY
            variables = {"type": event_handle, "after": after, "limit": limit}

        data = await asyncio.to_thread(
            self._request_sync,
            "POST",
            self.indexer_url,
            {"query": query, "variables": variables},
            False,
        )
        if data.get("errors"):
            raise NetworkError(
                "Indexer query failed",
                endpoint=self.indexer_url,
                details={"errors": data["errors"]},
            )
        return list((data.get("data") or {}).get("events") or [])

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------
    def _url(self, path: str) -> str:
        return f"{self.rpc_url}{path}"

    async def _get(self, path: str, *, allow_missing: bool = False) -> Any:
        return await asyncio.to_thread(self._request_sync, "GET", self._url(path), None, allow_missing)

    async def _post(self, path: str, body: Any) -> Any:
        return await asyncio.to_thread(self._request_sync, "POST", self._url(path), body, False)

    def _request_sync(self, method: str, url: str, body: Any, allow_missing: bool) -> Any:
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method, url, json=body, timeout=self._config.request_timeout
            )
        except requests.RequestException as exc:
            raise NetworkError(
                f"{method} request failed", endpoint=url, details={"error": str(exc)}
            ) from exc

        if allow_missing and response.status_code == 404:
            return None

        if not (200 <= response.status_code < 300):
            raise NetworkError(
                f"{method} request returned HTTP {response.status_code}",
                endpoint=url,
                status_code=response.status_code,
                details={"body": _safe_body(response)},
            )

        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(
                "Response was not valid JSON", endpoint=url, status_code=response.status_code
            ) from exc


def _safe_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:500]
