"""Contract facade over view calls and entry-function transactions."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from .exceptions import ErrorCode, MoveBridgeError, NetworkError, ValidationError
from .network import NetworkClient
from .transaction import TransactionManager
from .types import Hash, TransactionPayload
from .utils import is_valid_address, parse_function_id

logger = logging.getLogger(__name__)


class Contract:
    """Handle on one deployed Move module."""

    def __init__(
        self,
        network: NetworkClient,
        transactions: TransactionManager,
        address: str,
        module: str,
    ) -> None:
        if not is_valid_address(address):
            raise ValidationError(
                f"Invalid module address: {address}",
                field="address",
                value=address,
                code=ErrorCode.INVALID_ADDRESS,
            )
        if not module:
            raise ValidationError("Module name is required", field="module", value=module)

        self._network = network
        self._transactions = transactions
        self.address = address
        self.module = module

    def full_name(self, function: str) -> str:
        full = f"{self.address}::{self.module}::{function}"
        parse_function_id(full)
        return full

    async def view(
        self,
        function: str,
        arguments: Sequence[Any] = (),
        type_arguments: Sequence[str] = (),
    ) -> list[Any]:
        full = self.full_name(function)
        try:
            return await self._network.view(full, list(type_arguments), list(arguments))
        except Exception as exc:
            details: dict[str, Any] = {"function": full, "error": str(exc), "original": exc}
            if isinstance(exc, NetworkError):
                details.update({"endpoint": exc.endpoint, "status_code": exc.status_code})
            raise MoveBridgeError(
                ErrorCode.VIEW_FUNCTION_FAILED,
                f"View function {full} failed",
                details,
            ) from exc

    def payload(
        self,
        function: str,
        arguments: Sequence[Any] = (),
        type_arguments: Sequence[str] = (),
    ) -> TransactionPayload:
        return self._transactions.build(
            self.full_name(function), arguments=arguments, type_arguments=type_arguments
        )

    async def call(
        self,
        function: str,
        arguments: Sequence[Any] = (),
        type_arguments: Sequence[str] = (),
    ) -> Hash:
        payload = self.payload(function, arguments, type_arguments)
        logger.info("Calling %s", payload.function)
        return await self._transactions.sign_and_submit(payload)

    async def get_resource(self, resource_type: str) -> dict[str, Any] | None:
        return await self._network.get_account_resource(self.address, resource_type)

    async def has_resource(self, resource_type: str) -> bool:
        return await self.get_resource(resource_type) is not None

    def __repr__(self) -> str:
        return f"Contract({self.address}::{self.module})"
