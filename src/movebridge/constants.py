"""Constants shared across the MoveBridge SDK."""

from enum import Enum

# Native coin of the Movement network, 1 MOVE = 10**8 octas
NATIVE_COIN_TYPE = "0x1::aptos_coin::AptosCoin"
NATIVE_COIN_DECIMALS = 8
NATIVE_COIN_SYMBOL = "MOVE"

TRANSFER_FUNCTION = "0x1::aptos_account::transfer_coins"
ENTRY_FUNCTION_PAYLOAD = "entry_function_payload"
ED25519_SIGNATURE = "ed25519_signature"

# Dry runs need a full request envelope but no real signer
SIMULATION_SENDER = "0x" + "0" * 64
SIMULATION_MAX_GAS_AMOUNT = 200_000
SIMULATION_GAS_UNIT_PRICE = 100
SIMULATION_EXPIRATION_SECS = 60

# Only key the SDK persists to durable storage
LAST_WALLET_STORAGE_KEY = "movebridge:lastWallet"

DEFAULT_TRANSACTION_TIMEOUT_MS = 30_000
DEFAULT_TRANSACTION_CHECK_INTERVAL_MS = 1_000
DEFAULT_EVENT_POLL_INTERVAL = 3.0
DEFAULT_EVENT_PAGE_SIZE = 25
DEFAULT_REQUEST_TIMEOUT = 10.0

ADDRESS_HEX_LENGTH = 64

FUNCTION_ID_FORMAT = "address::module::function"
EVENT_HANDLE_FORMAT = "address::module::EventType"


class WalletEvent(str, Enum):
    """Notifications emitted by the wallet manager."""

    CONNECT = "connect"
    DISCONNECT = "disconnect"
    ACCOUNT_CHANGED = "accountChanged"
    NETWORK_CHANGED = "networkChanged"


class KnownWallet(str, Enum):
    """Identifiers of the browser wallets the SDK knows how to talk to."""

    RAZOR = "razor"
    NIGHTLY = "nightly"
    OKX = "okx"


WALLET_METADATA = {
    KnownWallet.RAZOR.value: {
        "name": "Razor Wallet",
        "icon": "https://razorwallet.xyz/favicon.ico",
        "url": "https://razorwallet.xyz",
    },
    KnownWallet.NIGHTLY.value: {
        "name": "Nightly",
        "icon": "https://nightly.app/favicon.ico",
        "url": "https://nightly.app",
    },
    KnownWallet.OKX.value: {
        "name": "OKX Wallet",
        "icon": "https://www.okx.com/favicon.ico",
        "url": "https://www.okx.com/web3",
    },
}
