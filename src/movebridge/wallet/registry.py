"""Detection of the wallet providers available in the host environment."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..exceptions import ValidationError
from ..types import WalletInfo
from .base import WalletProvider

logger = logging.getLogger(__name__)


class WalletRegistry:
    """Providers injected into the environment, keyed by provider id."""

    def __init__(self, providers: Iterable[WalletProvider] = ()) -> None:
        self._providers: dict[str, WalletProvider] = {}
        for provider in providers:
            self.register(provider)

    def register(self, provider: WalletProvider) -> None:
        if not provider.id:
            raise ValidationError(
                "Wallet provider must define a non-empty id", field="id", value=provider.id
            )
        self._providers[provider.id] = provider

    def unregister(self, provider_id: str) -> None:
        self._providers.pop(provider_id, None)

    def get(self, provider_id: str) -> WalletProvider | None:
        return self._providers.get(provider_id)

    def detect(self) -> list[str]:
        """Return ids of installed providers in registration order."""

        detected = []
        for provider_id, provider in self._providers.items():
            try:
                installed = provider.is_installed()
            except Exception as exc:
                logger.debug("Installation check for %s failed: %s", provider_id, exc)
                installed = False
            if installed:
                detected.append(provider_id)
        return detected

    def wallet_infos(self) -> list[WalletInfo]:
        return [provider.info for provider in self._providers.values()]

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def __len__(self) -> int:
        return len(self._providers)
