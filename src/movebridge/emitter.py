"""Minimal publish/subscribe primitive used by the wallet manager."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class ConnectEvent:
    address: str
    wallet: str


@dataclass(frozen=True)
class DisconnectEvent:
    wallet: str | None
    reason: str = "user"


@dataclass(frozen=True)
class AccountChangedEvent:
    address: str | None
    wallet: str | None = None


@dataclass(frozen=True)
class NetworkChangedEvent:
    network: Any
    wallet: str | None = None


class EventEmitter:
    """Synchronous event emitter with per-registration unsubscribe handles."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def on(self, event: str, handler: Handler) -> Unsubscribe:
        key = _event_key(event)
        self._handlers.setdefault(key, []).append(handler)

        def unsubscribe() -> None:
            self._remove(key, handler)

        return unsubscribe

    def once(self, event: str, handler: Handler) -> Unsubscribe:
        unsubscribe: Unsubscribe

        def wrapper(payload: Any) -> Any:
            unsubscribe()
            return handler(payload)

        unsubscribe = self.on(event, wrapper)
        return unsubscribe

    def emit(self, event: str, payload: Any = None) -> int:
        """Invoke every handler for ``event``; return how many were called."""

        handlers = list(self._handlers.get(_event_key(event), ()))
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                logger.exception("Listener for %s raised", _event_key(event))
        return len(handlers)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(_event_key(event), ()))

    def clear(self) -> None:
        self._handlers.clear()

    def _remove(self, key: str, handler: Handler) -> None:
        handlers = self._handlers.get(key)
        if not handlers:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            return
        if not handlers:
            del self._handlers[key]


def _event_key(event: Any) -> str:
    return str(getattr(event, "value", event))
