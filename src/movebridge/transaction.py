"""Transaction building, signing, submission and confirmation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from .clock import AsyncioClock, Clock
from .constants import (
    DEFAULT_TRANSACTION_CHECK_INTERVAL_MS,
    DEFAULT_TRANSACTION_TIMEOUT_MS,
    NATIVE_COIN_TYPE,
    TRANSFER_FUNCTION,
)
from .exceptions import (
    ErrorCode,
    MoveBridgeError,
    NetworkError,
    TransactionError,
    ValidationError,
    WalletError,
    wrap_error,
)
from .network import NetworkClient
from .types import (
    Hash,
    SignedTransaction,
    SimulationResult,
    TransactionPayload,
    TransactionResponse,
    ensure_bytes,
)
from .utils import is_valid_address, parse_function_id, parse_octas
from .wallet import WalletManager

logger = logging.getLogger(__name__)

PENDING_TRANSACTION = "pending_transaction"


class TransactionManager:
    """Build -> sign -> submit -> confirm pipeline.

    Every stage is callable on its own. Submission is single-shot; only the
    confirmation wait polls.
    """

    def __init__(
        self,
        network: NetworkClient,
        wallet: WalletManager,
        *,
        clock: Clock | None = None,
        timeout_ms: int = DEFAULT_TRANSACTION_TIMEOUT_MS,
        check_interval_ms: int = DEFAULT_TRANSACTION_CHECK_INTERVAL_MS,
    ) -> None:
        self._network = network
        self._wallet = wallet
        self._clock: Clock = clock or AsyncioClock()
        self._timeout_ms = timeout_ms
        self._check_interval_ms = check_interval_ms

    # ------------------------------------------------------------------
    # Payload construction
    # ------------------------------------------------------------------
    def build(
        self,
        function: str,
        arguments: Sequence[Any] = (),
        type_arguments: Sequence[str] = (),
    ) -> TransactionPayload:
        parse_function_id(function)
        _require_sequence(arguments, "arguments")
        _require_sequence(type_arguments, "type_arguments")

        for type_arg in type_arguments:
            if not isinstance(type_arg, str) or not type_arg:
                raise ValidationError(
                    "Type arguments must be non-empty strings",
                    field="type_arguments",
                    value=type_arg,
                )

        return TransactionPayload(
            function=function,
            type_arguments=tuple(type_arguments),
            arguments=tuple(arguments),
        )

    def transfer(
        self,
        to: str,
        amount: int | str,
        coin_type: str | None = None,
    ) -> TransactionPayload:
        """Payload moving ``amount`` octas of ``coin_type`` (native coin by default) to ``to``."""

        if not to:
            raise ValidationError("Recipient address is required", field="to", value=to)
        if not is_valid_address(to):
            raise ValidationError("Recipient address is malformed", field="to", value=to)

        octas = parse_octas(amount)
        return self.build(
            TRANSFER_FUNCTION,
            arguments=[to, str(octas)],
            type_arguments=[coin_type or NATIVE_COIN_TYPE],
        )

    # ------------------------------------------------------------------
    # Signing and submission
    # ------------------------------------------------------------------
    async def sign(self, payload: TransactionPayload) -> SignedTransaction:
        provider = self._wallet.connected_provider
        state = self._wallet.get_state()
        if provider is None or not state.connected or state.address is None:
            raise WalletError(ErrorCode.WALLET_NOT_CONNECTED, "No wallet is connected")

        sender = state.address
        try:
            signature = await provider.sign_transaction(payload, sender)
        except MoveBridgeError:
            raise
        except Exception as exc:
            error = wrap_error(exc, ErrorCode.TRANSACTION_FAILED, "Wallet failed to sign transaction")
            error.details.update({"wallet": provider.id, "function": payload.function})
            raise error from exc

        if self._wallet.connected_provider is not provider:
            raise WalletError(
                ErrorCode.WALLET_NOT_CONNECTED,
                "Wallet disconnected while signing",
                wallet=provider.id,
            )

        logger.debug("Signed %s for %s", payload.function, sender)
        return SignedTransaction(
            payload=payload,
            signature=ensure_bytes(signature),
            sender=sender,
            public_key=state.public_key,
        )

    async def submit(self, signed: SignedTransaction) -> Hash:
        endpoint = self._endpoint("/transactions")
        try:
            tx_hash = await self._network.submit_transaction(signed)
        except NetworkError as exc:
            if exc.endpoint is None:
                exc.endpoint = endpoint
            raise
        except MoveBridgeError:
            raise
        except Exception as exc:
            raise NetworkError(
                "Failed to submit transaction",
                endpoint=endpoint,
                details={"function": signed.payload.function, "error": str(exc)},
            ) from exc

        logger.info("Submitted %s from %s hash=%s", signed.payload.function, signed.sender, tx_hash)
        return tx_hash

    async def sign_and_submit(self, payload: TransactionPayload) -> Hash:
        signed = await self.sign(payload)
        return await self.submit(signed)

    async def submit_and_wait(
        self,
        payload: TransactionPayload,
        *,
        timeout_ms: int | None = None,
        check_interval_ms: int | None = None,
    ) -> TransactionResponse:
        tx_hash = await self.sign_and_submit(payload)
        return await self.wait_for_transaction(
            tx_hash, timeout_ms=timeout_ms, check_interval_ms=check_interval_ms
        )

    async def simulate(
        self, payload: TransactionPayload, sender: str | None = None
    ) -> SimulationResult:
        """Dry-run ``payload``; only a communication failure raises.

        Defaults to the connected account; with no wallet the network client
        simulates from a placeholder sender.
        """

        state = self._wallet.get_state()
        if sender is None:
            sender = state.address
        public_key = state.public_key if sender is not None and sender == state.address else None

        try:
            result = await self._network.simulate_transaction(
                payload, sender, public_key=public_key
            )
        except MoveBridgeError:
            raise
        except Exception as exc:
            raise NetworkError(
                "Failed to simulate transaction",
                endpoint=self._endpoint("/transactions/simulate"),
                details={"function": payload.function, "error": str(exc)},
            ) from exc

        simulation = SimulationResult.from_dict(result)
        logger.debug(
            "Simulated %s success=%s gas=%s", payload.function, simulation.success, simulation.gas_used
        )
        return simulation

    # ------------------------------------------------------------------
    # Confirmation
    # ------------------------------------------------------------------
    async def wait_for_transaction(
        self,
        tx_hash: Hash,
        *,
        timeout_ms: int | None = None,
        check_interval_ms: int | None = None,
    ) -> TransactionResponse:
        """Poll until ``tx_hash`` is finalised or ``timeout_ms`` elapses.

        A transaction that executed and failed is returned with
        ``success=False``. Errors from the status query end the wait.
        """

        if not isinstance(tx_hash, str) or not tx_hash:
            raise ValidationError("Transaction hash is required", field="hash", value=tx_hash)

        timeout_ms = self._timeout_ms if timeout_ms is None else timeout_ms
        check_interval_ms = self._check_interval_ms if check_interval_ms is None else check_interval_ms
        if timeout_ms <= 0 or check_interval_ms <= 0:
            raise ValidationError(
                "timeout_ms and check_interval_ms must be positive",
                field="timeout_ms",
                value={"timeout_ms": timeout_ms, "check_interval_ms": check_interval_ms},
            )

        deadline = self._clock.now() + timeout_ms / 1000
        interval = check_interval_ms / 1000
        attempts = 0

        while True:
            attempts += 1
            data = await self._fetch_transaction(tx_hash)
            if data is not None and data.get("type") != PENDING_TRANSACTION:
                response = self._to_response(tx_hash, data)
                logger.info(
                    "Transaction %s finalised success=%s vm_status=%s",
                    tx_hash,
                    response.success,
                    response.vm_status,
                )
                return response

            remaining = deadline - self._clock.now()
            if remaining <= 0:
                raise TransactionError(
                    ErrorCode.TRANSACTION_TIMEOUT,
                    f"Transaction {tx_hash} was not confirmed within {timeout_ms}ms",
                    hash=tx_hash,
                    details={"hash": tx_hash, "timeout_ms": timeout_ms, "attempts": attempts},
                )

            await self._clock.sleep(min(interval, remaining))

    async def _fetch_transaction(self, tx_hash: Hash) -> dict[str, Any] | None:
        try:
            return await self._network.get_transaction_by_hash(tx_hash)
        except MoveBridgeError:
            raise
        except Exception as exc:
            raise NetworkError(
                "Failed to query transaction status",
                endpoint=self._endpoint(f"/transactions/by_hash/{tx_hash}"),
                details={"hash": tx_hash, "error": str(exc)},
            ) from exc

    def _to_response(self, tx_hash: Hash, data: dict[str, Any]) -> TransactionResponse:
        reported = str(data.get("hash", tx_hash))
        if reported.lower() != tx_hash.lower():
            raise NetworkError(
                "Node returned a different transaction than requested",
                endpoint=self._endpoint(f"/transactions/by_hash/{tx_hash}"),
                details={"hash": tx_hash, "reported": reported},
            )
        return TransactionResponse.from_dict({**data, "hash": tx_hash})

    def _endpoint(self, path: str) -> str | None:
        rpc_url = getattr(self._network, "rpc_url", None)
        return f"{rpc_url}{path}" if rpc_url else None


def _require_sequence(value: Any, field: str) -> None:
    if isinstance(value, str | bytes) or not isinstance(value, Sequence):
        raise ValidationError(f"{field} must be a list", field=field, value=value)
