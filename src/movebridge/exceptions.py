"""Exception hierarchy for the MoveBridge SDK."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable failure kinds carried by every SDK error."""

    INVALID_ADDRESS = "INVALID_ADDRESS"
    WALLET_NOT_FOUND = "WALLET_NOT_FOUND"
    WALLET_CONNECTION_FAILED = "WALLET_CONNECTION_FAILED"
    WALLET_NOT_CONNECTED = "WALLET_NOT_CONNECTED"
    TRANSACTION_FAILED = "TRANSACTION_FAILED"
    TRANSACTION_TIMEOUT = "TRANSACTION_TIMEOUT"
    VIEW_FUNCTION_FAILED = "VIEW_FUNCTION_FAILED"
    INVALID_EVENT_HANDLE = "INVALID_EVENT_HANDLE"
    NETWORK_ERROR = "NETWORK_ERROR"
    ABI_FETCH_FAILED = "ABI_FETCH_FAILED"
    CODEGEN_FAILED = "CODEGEN_FAILED"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"


class MoveBridgeError(Exception):
    """Base exception for all MoveBridge errors."""

    def __init__(self, code: ErrorCode, message: str, details: dict | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        details = {key: value for key, value in self.details.items() if key != "original"}
        return {"code": self.code.value, "message": self.message, "details": details}


class ValidationError(MoveBridgeError):
    """Raised when local input validation fails, before any external call."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        *,
        code: ErrorCode = ErrorCode.INVALID_ARGUMENT,
        details: dict | None = None,
    ):
        super().__init__(code, message, details)
        self.field = field
        self.value = value


class WalletError(MoveBridgeError):
    """Raised for wallet lifecycle failures."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        wallet: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(code, message, details)
        self.wallet = wallet


class TransactionError(MoveBridgeError):
    """Raised when a transaction outcome could not be determined."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        hash: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(code, message, details)
        self.hash = hash


class NetworkError(MoveBridgeError):
    """Raised when network/connection issues occur."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(ErrorCode.NETWORK_ERROR, message, details)
        self.endpoint = endpoint
        self.status_code = status_code


def is_movebridge_error(value: Any) -> bool:
    return isinstance(value, MoveBridgeError)


def wrap_error(original: BaseException, code: ErrorCode, message: str) -> MoveBridgeError:
    """Lift an arbitrary failure into the structured error shape.

    Errors that already carry a code are returned untouched so the innermost
    classification wins.
    """

    if isinstance(original, MoveBridgeError):
        return original

    details = {"original": original, "error": str(original)}
    if code is ErrorCode.NETWORK_ERROR:
        error: MoveBridgeError = NetworkError(message, details=details)
    elif code in (ErrorCode.TRANSACTION_FAILED, ErrorCode.TRANSACTION_TIMEOUT):
        error = TransactionError(code, message, details=details)
    elif code in (
        ErrorCode.WALLET_NOT_FOUND,
        ErrorCode.WALLET_CONNECTION_FAILED,
        ErrorCode.WALLET_NOT_CONNECTED,
    ):
        error = WalletError(code, message, details=details)
    elif code in (
        ErrorCode.INVALID_ADDRESS,
        ErrorCode.INVALID_ARGUMENT,
        ErrorCode.INVALID_EVENT_HANDLE,
    ):
        error = ValidationError(message, code=code, details=details)
    else:
        error = MoveBridgeError(code, message, details)

    error.__cause__ = original
    return error
