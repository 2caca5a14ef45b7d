"""Configuration containers for the MoveBridge SDK."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum

from .constants import (
    DEFAULT_EVENT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TRANSACTION_CHECK_INTERVAL_MS,
    DEFAULT_TRANSACTION_TIMEOUT_MS,
)
from .exceptions import ValidationError


class Network(str, Enum):
    """Movement networks the SDK can target."""

    MAINNET = "mainnet"
    TESTNET = "testnet"
    DEVNET = "devnet"
    CUSTOM = "custom"


@dataclass(frozen=True)
class NetworkEndpoints:
    chain_id: int
    rpc_url: str
    indexer_url: str | None = None
    explorer_url: str | None = None


NETWORK_ENDPOINTS = {
    Network.MAINNET: NetworkEndpoints(
        chain_id=126,
        rpc_url="https://mainnet.movementnetwork.xyz/v1",
        indexer_url="https://indexer.mainnet.movementnetwork.xyz/v1/graphql",
        explorer_url="https://explorer.movementnetwork.xyz",
    ),
    Network.TESTNET: NetworkEndpoints(
        chain_id=250,
        rpc_url="https://testnet.bardock.movementnetwork.xyz/v1",
        indexer_url="https://indexer.testnet.movementnetwork.xyz/v1/graphql",
        explorer_url="https://explorer.movementnetwork.xyz/?network=bardock+testnet",
    ),
    Network.DEVNET: NetworkEndpoints(
        chain_id=27,
        rpc_url="https://devnet.movementnetwork.xyz/v1",
        indexer_url=None,
        explorer_url=None,
    ),
}


@dataclass(frozen=True)
class MovementConfig:
    """Aggregated configuration used to construct the SDK client."""

    network: Network = Network.TESTNET
    rpc_url: str | None = None
    indexer_url: str | None = None
    chain_id: int | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    auto_connect: bool = False
    event_poll_interval: float = DEFAULT_EVENT_POLL_INTERVAL
    transaction_timeout_ms: int = DEFAULT_TRANSACTION_TIMEOUT_MS
    transaction_check_interval_ms: int = DEFAULT_TRANSACTION_CHECK_INTERVAL_MS
    storage_path: str | None = None
    clear_subscriptions_on_disconnect: bool = False

    def with_defaulted_urls(self) -> MovementConfig:
        """Return a copy with RPC/indexer URLs resolved from the network selection."""

        network = Network(self.network)
        if network is Network.CUSTOM:
            if not self.rpc_url:
                raise ValidationError(
                    "A custom network requires an explicit rpc_url",
                    field="rpc_url",
                    value=self.rpc_url,
                )
            return replace(
                self,
                network=network,
                rpc_url=self.rpc_url.rstrip("/"),
                indexer_url=self.indexer_url.rstrip("/") if self.indexer_url else None,
            )

        endpoints = NETWORK_ENDPOINTS[network]
        rpc_url = (self.rpc_url or endpoints.rpc_url).rstrip("/")
        indexer_url = self.indexer_url or endpoints.indexer_url
        return replace(
            self,
            network=network,
            rpc_url=rpc_url,
            indexer_url=indexer_url.rstrip("/") if indexer_url else None,
            chain_id=self.chain_id if self.chain_id is not None else endpoints.chain_id,
        )

    @property
    def explorer_url(self) -> str | None:
        endpoints = NETWORK_ENDPOINTS.get(Network(self.network))
        return endpoints.explorer_url if endpoints else None

    @classmethod
    def from_env(cls, prefix: str = "MOVEBRIDGE_") -> MovementConfig:
        """Build a config from ``<prefix>NETWORK``, ``<prefix>RPC_URL`` and friends."""

        raw_network = os.getenv(f"{prefix}NETWORK", Network.TESTNET.value).lower()
        try:
            network = Network(raw_network)
        except ValueError:
            raise ValidationError(
                f"Unknown network: {raw_network}", field="network", value=raw_network
            )

        raw_timeout = os.getenv(f"{prefix}REQUEST_TIMEOUT")
        try:
            request_timeout = float(raw_timeout) if raw_timeout else DEFAULT_REQUEST_TIMEOUT
        except ValueError:
            raise ValidationError(
                "REQUEST_TIMEOUT must be a number", field="request_timeout", value=raw_timeout
            )

        return cls(
            network=network,
            rpc_url=os.getenv(f"{prefix}RPC_URL") or None,
            indexer_url=os.getenv(f"{prefix}INDEXER_URL") or None,
            request_timeout=request_timeout,
            auto_connect=os.getenv(f"{prefix}AUTO_CONNECT", "").lower() in ("1", "true", "yes"),
            storage_path=os.getenv(f"{prefix}STORAGE_PATH") or None,
        )
