"""MoveBridge - one Python interface to the Movement network.

Unifies wallet connection, transaction construction/submission, contract
calls and event subscriptions across the supported wallet providers.
"""

from .client import Movement
from .config import MovementConfig, Network
from .constants import KnownWallet, WalletEvent
from .contract import Contract
from .emitter import (
    AccountChangedEvent,
    ConnectEvent,
    DisconnectEvent,
    EventEmitter,
    NetworkChangedEvent,
)
from .events import EventSubscriptionEngine
from .exceptions import (
    ErrorCode,
    MoveBridgeError,
    NetworkError,
    TransactionError,
    ValidationError,
    WalletError,
    is_movebridge_error,
    wrap_error,
)
from .network import NetworkClient, RestNetworkClient
from .storage import FileStorage, KeyValueStorage, MemoryStorage
from .transaction import TransactionManager
from .types import (
    ContractEvent,
    MoveValue,
    SignedTransaction,
    SimulationResult,
    Subscription,
    TransactionPayload,
    TransactionResponse,
    WalletAccount,
    WalletInfo,
    WalletState,
)
from .utils import (
    from_octas,
    is_valid_address,
    is_valid_event_handle,
    normalize_address,
    parse_function_id,
    short_address,
    to_octas,
)
from .wallet import ConnectionStatus, WalletManager, WalletProvider, WalletRegistry

__version__ = "0.1.0"

__all__ = [
    # Client and components
    "Movement",
    "MovementConfig",
    "Network",
    "WalletManager",
    "WalletProvider",
    "WalletRegistry",
    "ConnectionStatus",
    "TransactionManager",
    "EventSubscriptionEngine",
    "Contract",
    "NetworkClient",
    "RestNetworkClient",
    "KeyValueStorage",
    "MemoryStorage",
    "FileStorage",
    "EventEmitter",
    # Types and enums
    "KnownWallet",
    "WalletEvent",
    "WalletState",
    "WalletAccount",
    "WalletInfo",
    "TransactionPayload",
    "SignedTransaction",
    "TransactionResponse",
    "SimulationResult",
    "ContractEvent",
    "Subscription",
    "MoveValue",
    "ConnectEvent",
    "DisconnectEvent",
    "AccountChangedEvent",
    "NetworkChangedEvent",
    # Exceptions
    "ErrorCode",
    "MoveBridgeError",
    "ValidationError",
    "WalletError",
    "TransactionError",
    "NetworkError",
    "is_movebridge_error",
    "wrap_error",
    # Utility functions
    "is_valid_address",
    "is_valid_event_handle",
    "normalize_address",
    "short_address",
    "parse_function_id",
    "to_octas",
    "from_octas",
]
