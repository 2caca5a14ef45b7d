"""Utility functions for the MoveBridge SDK."""

import re
import uuid
from decimal import Decimal, InvalidOperation

from .constants import (
    ADDRESS_HEX_LENGTH,
    EVENT_HANDLE_FORMAT,
    FUNCTION_ID_FORMAT,
    NATIVE_COIN_DECIMALS,
)
from .exceptions import ErrorCode, ValidationError

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{1,64}$")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_valid_address(address: object) -> bool:
    """Return True for 0x-prefixed hex addresses of 1 to 64 digits."""
    return isinstance(address, str) and bool(_ADDRESS_RE.match(address))


def normalize_address(address: str) -> str:
    """Return the long form: lowercase and left-padded to 64 hex digits."""
    if not is_valid_address(address):
        raise ValidationError(
            f"Invalid address: {address}",
            field="address",
            value=address,
            code=ErrorCode.INVALID_ADDRESS,
        )
    return "0x" + address[2:].lower().rjust(ADDRESS_HEX_LENGTH, "0")


def short_address(address: str, chars: int = 4) -> str:
    """Format an address for display, e.g. ``0x1234...abcd``."""
    normalized = normalize_address(address)
    return f"{normalized[:chars + 2]}...{normalized[-chars:]}"


def _split_qualified_name(name: object) -> tuple[str, str, str] | None:
    if not isinstance(name, str):
        return None

    parts = name.split("::")
    if len(parts) != 3:
        return None

    address, module, member = parts
    if not is_valid_address(address):
        return None
    if not (_IDENTIFIER_RE.match(module) and _IDENTIFIER_RE.match(member)):
        return None
    return address, module, member


def parse_function_id(function: object) -> tuple[str, str, str]:
    """Split ``address::module::function`` into its three parts."""
    parsed = _split_qualified_name(function)
    if parsed is None:
        raise ValidationError(
            f"Invalid function identifier: {function!r}",
            field="function",
            value=function,
            details={"expected": FUNCTION_ID_FORMAT},
        )
    return parsed


def is_valid_event_handle(event_handle: object) -> bool:
    """Return True for handles shaped like ``address::module::EventType``."""
    if not isinstance(event_handle, str):
        return False
    # Generic event types carry their type arguments after the struct name
    base = event_handle.split("<", 1)[0]
    return _split_qualified_name(base) is not None


def validate_event_handle(event_handle: object) -> str:
    if not is_valid_event_handle(event_handle):
        raise ValidationError(
            f"Invalid event handle: {event_handle!r}",
            field="event_handle",
            value=event_handle,
            code=ErrorCode.INVALID_EVENT_HANDLE,
            details={"expected": EVENT_HANDLE_FORMAT},
        )
    return str(event_handle)


def to_octas(amount: str | int | float | Decimal, decimals: int = NATIVE_COIN_DECIMALS) -> int:
    """Convert a human readable coin amount to octas."""
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation:
        raise ValidationError("Amount must be numeric", field="amount", value=amount)

    if not value.is_finite():
        raise ValidationError("Amount must be finite", field="amount", value=amount)

    if value < 0:
        raise ValidationError("Amount cannot be negative", field="amount", value=amount)

    octas = value.scaleb(decimals)
    if octas != octas.to_integral_value():
        raise ValidationError(
            f"Amount has more than {decimals} decimal places", field="amount", value=amount
        )

    return int(octas)


def from_octas(octas: str | int, decimals: int = NATIVE_COIN_DECIMALS) -> Decimal:
    """Convert octas to a Decimal coin amount."""
    try:
        value = int(octas)
    except (TypeError, ValueError):
        raise ValidationError("Octas must be an integer", field="octas", value=octas)

    if value < 0:
        raise ValidationError("Octas cannot be negative", field="octas", value=octas)

    return Decimal(value).scaleb(-decimals)


def parse_octas(amount: object, field: str = "amount") -> int:
    """Validate an amount already expressed in octas (int or decimal string)."""
    if isinstance(amount, bool) or amount is None:
        raise ValidationError(f"{field} is required", field=field, value=amount)

    if isinstance(amount, int):
        value = amount
    elif isinstance(amount, str) and amount.strip().isdigit():
        value = int(amount.strip())
    else:
        raise ValidationError(
            f"{field} must be a non-negative integer amount of octas", field=field, value=amount
        )

    if value < 0:
        raise ValidationError(f"{field} cannot be negative", field=field, value=amount)

    return value


def generate_subscription_id() -> str:
    """Generate a unique subscription identifier."""
    return f"sub_{uuid.uuid4().hex}"
