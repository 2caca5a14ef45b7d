"""Wallet connection state machine."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from ..constants import LAST_WALLET_STORAGE_KEY, WalletEvent
from ..emitter import (
    AccountChangedEvent,
    ConnectEvent,
    DisconnectEvent,
    EventEmitter,
    NetworkChangedEvent,
    Unsubscribe,
)
from ..exceptions import ErrorCode, WalletError
from ..storage import KeyValueStorage, MemoryStorage
from ..types import WalletAccount, WalletInfo, WalletState
from ..utils import is_valid_address
from .base import WalletProvider
from .registry import WalletRegistry

logger = logging.getLogger(__name__)


class ConnectionStatus(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class WalletManager:
    """Own the single wallet connection of an SDK instance.

    ``Disconnected -> Connecting -> Connected``, back to ``Disconnected`` on
    failure, on ``disconnect()`` or when the provider reports a disconnect.
    """

    def __init__(
        self,
        registry: WalletRegistry,
        storage: KeyValueStorage | None = None,
    ) -> None:
        self._registry = registry
        self._storage: KeyValueStorage = storage if storage is not None else MemoryStorage()
        self._emitter = EventEmitter()
        self._status = ConnectionStatus.DISCONNECTED
        self._state = WalletState()
        self._provider: WalletProvider | None = None
        self._connecting: WalletProvider | None = None
        self._provider_listeners: list[Unsubscribe] = []
        # Bumped by every connect/disconnect so stale connect results are dropped
        self._generation = 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def connected_provider(self) -> WalletProvider | None:
        return self._provider if self._status is ConnectionStatus.CONNECTED else None

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    def get_state(self) -> WalletState:
        return self._state

    def detect_providers(self) -> list[str]:
        return self._registry.detect()

    def get_wallet_info(self) -> WalletInfo | None:
        """Display metadata of the connected wallet."""

        provider = self.connected_provider
        return provider.info if provider is not None else None

    def list_wallets(self) -> list[WalletInfo]:
        return self._registry.wallet_infos()

    def on(self, event: WalletEvent | str, handler: Callable[[Any], Any]) -> Unsubscribe:
        return self._emitter.on(event, handler)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def connect(self, provider_id: str) -> WalletState:
        detected = self.detect_providers()
        provider = self._registry.get(provider_id)
        if provider_id not in detected or provider is None:
            raise WalletError(
                ErrorCode.WALLET_NOT_FOUND,
                f"Wallet '{provider_id}' is not installed",
                wallet=provider_id,
                details={"wallet": provider_id, "available": detected},
            )

        if self._status is ConnectionStatus.CONNECTED:
            if self._provider is provider:
                return self._state
            await self.disconnect()

        self._generation += 1
        generation = self._generation
        self._status = ConnectionStatus.CONNECTING
        self._connecting = provider
        logger.info("Connecting to wallet %s", provider_id)

        try:
            account = await provider.connect()
            address = _account_address(account)
            if not is_valid_address(address):
                raise ValueError(f"wallet returned an invalid address: {address!r}")
            public_key = _account_public_key(account)
        except Exception as exc:
            if generation == self._generation:
                self._status = ConnectionStatus.DISCONNECTED
                self._connecting = None
            logger.warning("Connection to wallet %s failed: %s", provider_id, exc)
            raise WalletError(
                ErrorCode.WALLET_CONNECTION_FAILED,
                f"Failed to connect to wallet '{provider_id}'",
                wallet=provider_id,
                details={"wallet": provider_id, "error": str(exc), "original": exc},
            ) from exc

        if generation != self._generation:
            await self._release_superseded(provider)
            raise WalletError(
                ErrorCode.WALLET_CONNECTION_FAILED,
                f"Connection to wallet '{provider_id}' was cancelled",
                wallet=provider_id,
                details={"wallet": provider_id, "cancelled": True},
            )

        self._connecting = None
        self._provider = provider
        self._state = WalletState(
            connected=True,
            address=address,
            public_key=public_key,
        )
        self._status = ConnectionStatus.CONNECTED
        self._attach_provider_listeners(provider)
        self._persist(provider_id)

        logger.info("Connected to wallet %s as %s", provider_id, address)
        self._emitter.emit(WalletEvent.CONNECT, ConnectEvent(address=address, wallet=provider_id))
        return self._state

    async def disconnect(self) -> None:
        """Disconnect from any state; a no-op when already disconnected."""

        if self._status is ConnectionStatus.DISCONNECTED:
            return

        self._generation += 1
        provider = self._provider
        was_connected = self._status is ConnectionStatus.CONNECTED
        self._reset()
        self._forget()

        if provider is None or not was_connected:
            logger.info("Cancelled pending wallet connection")
            return

        try:
            await provider.disconnect()
        except Exception as exc:
            logger.warning("Wallet %s failed to disconnect cleanly: %s", provider.id, exc)

        logger.info("Disconnected from wallet %s", provider.id)
        self._emitter.emit(WalletEvent.DISCONNECT, DisconnectEvent(wallet=provider.id))

    async def auto_connect(self) -> WalletState | None:
        """Reconnect to the last used wallet if it is still installed.

        Passive startup never raises: a missing wallet or a rejected
        reconnection leaves the manager disconnected.
        """

        provider_id = self._read_persisted()
        if not provider_id:
            return None

        if provider_id not in self.detect_providers():
            logger.info("Previously used wallet %s is no longer available", provider_id)
            return None

        try:
            return await self.connect(provider_id)
        except WalletError as exc:
            logger.warning("Auto-connect to %s failed: %s", provider_id, exc)
            return None

    def destroy(self) -> None:
        """Detach every provider listener and drop local subscribers."""

        self._generation += 1
        self._connecting = None
        self._detach_provider_listeners()
        self._emitter.clear()

    # ------------------------------------------------------------------
    # Provider notifications
    # ------------------------------------------------------------------
    def _attach_provider_listeners(self, provider: WalletProvider) -> None:
        self._detach_provider_listeners()

        def on_account_change(account: Any) -> None:
            if self._provider is not provider:
                return
            self._handle_account_change(provider, account)

        def on_network_change(network: Any) -> None:
            if self._provider is not provider:
                return
            self._emitter.emit(
                WalletEvent.NETWORK_CHANGED, NetworkChangedEvent(network=network, wallet=provider.id)
            )

        def on_disconnect(_payload: Any) -> None:
            if self._provider is not provider:
                return
            self._handle_provider_disconnect(provider)

        self._provider_listeners = [
            provider.on_account_change(on_account_change),
            provider.on_network_change(on_network_change),
            provider.on_disconnect(on_disconnect),
        ]

    def _detach_provider_listeners(self) -> None:
        listeners, self._provider_listeners = self._provider_listeners, []
        for unsubscribe in listeners:
            unsubscribe()

    def _handle_account_change(self, provider: WalletProvider, account: Any) -> None:
        if account is None:
            # Locked wallets report no account
            self._handle_provider_disconnect(provider)
            return

        address = _account_address(account)
        if not is_valid_address(address):
            logger.warning("Ignoring account change with invalid address %r", address)
            return

        public_key = _account_public_key(account)
        self._state = WalletState(
            connected=True,
            address=address,
            public_key=public_key if public_key is not None else self._state.public_key,
        )
        logger.info("Wallet %s switched account to %s", provider.id, address)
        self._emitter.emit(
            WalletEvent.ACCOUNT_CHANGED, AccountChangedEvent(address=address, wallet=provider.id)
        )

    def _handle_provider_disconnect(self, provider: WalletProvider) -> None:
        if self._status is not ConnectionStatus.CONNECTED:
            return

        self._generation += 1
        self._reset()
        self._forget()
        logger.info("Wallet %s reported a disconnect", provider.id)
        self._emitter.emit(
            WalletEvent.DISCONNECT, DisconnectEvent(wallet=provider.id, reason="provider")
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    async def _release_superseded(self, provider: WalletProvider) -> None:
        # A newer connect may own the same provider
        if provider is self._provider or provider is self._connecting:
            return
        try:
            await provider.disconnect()
        except Exception as exc:
            logger.warning("Wallet %s failed to disconnect cleanly: %s", provider.id, exc)
        logger.info("Released superseded connection to wallet %s", provider.id)

    def _reset(self) -> None:
        self._detach_provider_listeners()
        self._provider = None
        self._connecting = None
        self._state = WalletState()
        self._status = ConnectionStatus.DISCONNECTED

    def _persist(self, provider_id: str) -> None:
        try:
            self._storage.set(LAST_WALLET_STORAGE_KEY, provider_id)
        except OSError as exc:
            logger.warning("Could not persist selected wallet: %s", exc)

    def _forget(self) -> None:
        try:
            self._storage.remove(LAST_WALLET_STORAGE_KEY)
        except OSError as exc:
            logger.warning("Could not clear persisted wallet: %s", exc)

    def _read_persisted(self) -> str | None:
        try:
            return self._storage.get(LAST_WALLET_STORAGE_KEY)
        except OSError as exc:
            logger.warning("Could not read persisted wallet: %s", exc)
            return None


def _account_address(account: Any) -> str:
    if isinstance(account, WalletAccount):
        return account.address
    if isinstance(account, str):
        return account
    return str(getattr(account, "address", ""))


def _account_public_key(account: Any) -> bytes | None:
    if isinstance(account, WalletAccount):
        return account.public_key_bytes()
    return None
