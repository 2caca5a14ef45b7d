"""Wallet detection and connection management."""

from .base import WalletProvider
from .manager import ConnectionStatus, WalletManager
from .registry import WalletRegistry

__all__ = [
    "ConnectionStatus",
    "WalletManager",
    "WalletProvider",
    "WalletRegistry",
]
