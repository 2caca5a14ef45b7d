"""Top-level SDK client composing wallet, transactions, events and contracts."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Iterable
from typing import Any, TypeVar

from .clock import Clock
from .config import MovementConfig, Network
from .constants import NATIVE_COIN_TYPE, WalletEvent
from .contract import Contract
from .emitter import Unsubscribe
from .events import EventSubscriptionEngine
from .exceptions import ErrorCode, MoveBridgeError, NetworkError, ValidationError
from .network import NetworkClient, RestNetworkClient
from .storage import FileStorage, KeyValueStorage, MemoryStorage
from .transaction import PENDING_TRANSACTION, TransactionManager
from .types import Hash, TransactionResponse, WalletInfo
from .utils import is_valid_address
from .wallet import WalletManager, WalletProvider, WalletRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Movement:
    """Entry point of the SDK; one instance owns one wallet connection and one
    subscription registry.

    Example::

        movement = await Movement.create(network="testnet", wallets=[razor])
        await movement.wallet.connect("razor")
        payload = movement.transaction.transfer(to="0x2", amount=1_000_000)
        tx_hash = await movement.transaction.sign_and_submit(payload)
        result = await movement.wait_for_transaction(tx_hash)
    """

    def __init__(
        self,
        config: MovementConfig | None = None,
        *,
        network: Network | str | None = None,
        wallets: Iterable[WalletProvider] = (),
        registry: WalletRegistry | None = None,
        storage: KeyValueStorage | None = None,
        network_client: NetworkClient | None = None,
        clock: Clock | None = None,
    ) -> None:
        if config is None:
            config = MovementConfig(network=Network(network) if network else Network.TESTNET)
        self._config = config.with_defaulted_urls()

        if storage is None:
            storage = (
                FileStorage(self._config.storage_path)
                if self._config.storage_path
                else MemoryStorage()
            )

        self._owns_network = network_client is None
        self._network: NetworkClient = network_client or RestNetworkClient(self._config)
        self._registry = registry or WalletRegistry(wallets)

        self.wallet = WalletManager(self._registry, storage)
        self.transaction = TransactionManager(
            self._network,
            self.wallet,
            clock=clock,
            timeout_ms=self._config.transaction_timeout_ms,
            check_interval_ms=self._config.transaction_check_interval_ms,
        )
        self.events = EventSubscriptionEngine(
            self._network,
            poll_interval=self._config.event_poll_interval,
            clock=clock,
        )

        self._listeners: list[Unsubscribe] = []
        if self._config.clear_subscriptions_on_disconnect:
            self._listeners.append(
                self.wallet.on(WalletEvent.DISCONNECT, lambda _event: self.events.unsubscribe_all())
            )
        self._destroyed = False

    @classmethod
    async def create(cls, config: MovementConfig | None = None, **kwargs: Any) -> Movement:
        """Construct a client and, when configured, reconnect the last wallet."""

        client = cls(config, **kwargs)
        if client.config.auto_connect:
            await client.wallet.auto_connect()
        return client

    def destroy(self) -> None:
        """Stop polling, detach wallet listeners and release the HTTP session."""

        if self._destroyed:
            return
        self._destroyed = True

        self.events.unsubscribe_all()
        listeners, self._listeners = self._listeners, []
        for unsubscribe in listeners:
            unsubscribe()
        self.wallet.destroy()

        if self._owns_network and isinstance(self._network, RestNetworkClient):
            self._network.close()
        logger.info("Movement client destroyed")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def config(self) -> MovementConfig:
        return self._config

    @property
    def network(self) -> Network:
        return Network(self._config.network)

    def get_network_client(self) -> NetworkClient:
        """Raw network client for calls the SDK does not wrap."""

        return self._network

    def get_wallet_info(self) -> WalletInfo | None:
        return self.wallet.get_wallet_info()

    def contract(self, address: str, module: str) -> Contract:
        return Contract(self._network, self.transaction, address, module)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def get_account_balance(self, address: str, coin_type: str = NATIVE_COIN_TYPE) -> str:
        """Balance of ``coin_type`` held by ``address``, in octas."""

        _require_address(address)
        return await self._read(
            self._network.get_account_balance(address, coin_type),
            f"Failed to fetch balance of {address}",
        )

    async def get_account_resources(self, address: str) -> list[dict[str, Any]]:
        _require_address(address)
        return await self._read(
            self._network.get_account_resources(address),
            f"Failed to fetch resources of {address}",
        )

    async def get_transaction(self, tx_hash: Hash) -> TransactionResponse | None:
        """Finalised transaction, or ``None`` while unknown or pending."""

        data = await self._read(
            self._network.get_transaction_by_hash(tx_hash),
            f"Failed to fetch transaction {tx_hash}",
        )
        if data is None or data.get("type") == PENDING_TRANSACTION:
            return None
        return TransactionResponse.from_dict(data)

    async def wait_for_transaction(
        self,
        tx_hash: Hash,
        *,
        timeout_ms: int | None = None,
        check_interval_ms: int | None = None,
    ) -> TransactionResponse:
        return await self.transaction.wait_for_transaction(
            tx_hash, timeout_ms=timeout_ms, check_interval_ms=check_interval_ms
        )

    async def _read(self, call: Awaitable[T], message: str) -> T:
        try:
            return await call
        except MoveBridgeError:
            raise
        except Exception as exc:
            raise NetworkError(
                message,
                endpoint=getattr(self._network, "rpc_url", None),
                details={"error": str(exc)},
            ) from exc


def _require_address(address: str) -> None:
    if not is_valid_address(address):
        raise ValidationError(
            f"Invalid address: {address}",
            field="address",
            value=address,
            code=ErrorCode.INVALID_ADDRESS,
        )
