"""Wallet provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ..constants import WALLET_METADATA
from ..emitter import EventEmitter, Unsubscribe
from ..types import Address, TransactionPayload, WalletAccount, WalletInfo

ACCOUNT_CHANGE = "accountChange"
NETWORK_CHANGE = "networkChange"
DISCONNECT = "disconnect"


class WalletProvider(ABC):
    """A wallet capability injected into the host environment.

    Signing happens inside the wallet; the SDK never sees key material.
    Concrete providers call ``_notify_*`` when the wallet reports a change.
    """

    id: str = ""

    def __init__(self) -> None:
        self._events = EventEmitter()

    @property
    def info(self) -> WalletInfo:
        metadata = WALLET_METADATA.get(self.id, {})
        return WalletInfo(
            id=self.id,
            name=metadata.get("name", self.id),
            icon=metadata.get("icon"),
            url=metadata.get("url"),
            installed=self.is_installed(),
        )

    def is_installed(self) -> bool:
        return True

    @abstractmethod
    async def connect(self) -> WalletAccount:
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass

    @abstractmethod
    async def sign_transaction(self, payload: TransactionPayload, sender: Address) -> bytes:
        pass

    # ------------------------------------------------------------------
    # Change notifications
    # ------------------------------------------------------------------
    def on_account_change(self, handler: Callable[[Any], Any]) -> Unsubscribe:
        return self._events.on(ACCOUNT_CHANGE, handler)

    def on_network_change(self, handler: Callable[[Any], Any]) -> Unsubscribe:
        return self._events.on(NETWORK_CHANGE, handler)

    def on_disconnect(self, handler: Callable[[Any], Any]) -> Unsubscribe:
        return self._events.on(DISCONNECT, handler)

    def listener_count(self) -> int:
        return sum(
            self._events.listener_count(event)
            for event in (ACCOUNT_CHANGE, NETWORK_CHANGE, DISCONNECT)
        )

    def _notify_account_change(self, account: WalletAccount | str | None) -> None:
        self._events.emit(ACCOUNT_CHANGE, account)

    def _notify_network_change(self, network: Any) -> None:
        self._events.emit(NETWORK_CHANGE, network)

    def _notify_disconnect(self) -> None:
        self._events.emit(DISCONNECT, None)
