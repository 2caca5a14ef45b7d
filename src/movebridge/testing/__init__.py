"""Testing utilities: seeded fakers, in-memory mocks and a virtual clock."""

from .clock import VirtualClock
from .fakers import Faker, fake_address, fake_hash
from .mocks import MockNetworkClient, MockWalletProvider

__all__ = [
    "Faker",
    "MockNetworkClient",
    "MockWalletProvider",
    "VirtualClock",
    "fake_address",
    "fake_hash",
]
