from __future__ import annotations

import pytest

from movebridge.storage import MemoryStorage
from movebridge.testing import MockNetworkClient, MockWalletProvider, VirtualClock
from movebridge.wallet import WalletManager, WalletRegistry


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def network() -> MockNetworkClient:
    return MockNetworkClient(seed=7)


@pytest.fixture
def razor() -> MockWalletProvider:
    return MockWalletProvider("razor", seed=1)


@pytest.fixture
def nightly() -> MockWalletProvider:
    return MockWalletProvider("nightly", seed=2)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def wallet(
    razor: MockWalletProvider, nightly: MockWalletProvider, storage: MemoryStorage
) -> WalletManager:
    return WalletManager(WalletRegistry([razor, nightly]), storage)
