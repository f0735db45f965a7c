"""Domain-specific exceptions."""

from __future__ import annotations

from typing import Any, Optional


class ChainSendError(Exception):
    """Base class for every error raised by chainsend."""


class InvalidPaymentShapeError(ChainSendError):
    """Raised when a payment is not one-to-one."""

    def __init__(self, payment_id: Optional[str]) -> None:
        self.payment_id = payment_id
        super().__init__(
            f"Payment {payment_id} must have exactly one source and one "
            "destination transfer"
        )


class ConditionConfigError(ChainSendError):
    """Raised when condition parameters do not describe a legal settlement mode."""


class RemoteServiceError(ChainSendError):
    """A remote service answered with a non-success status."""

    service = "remote"

    def __init__(self, status_code: int, body: Any, url: Optional[str] = None) -> None:
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"Remote {self.service} error: {status_code} {body!r}")


class RemoteLedgerError(RemoteServiceError):
    """Raised when a ledger or payment endpoint rejects a request."""

    service = "ledger"


class RemoteNotaryError(RemoteServiceError):
    """Raised when the notary rejects a request."""

    service = "notary"


class TransferStateTimeoutError(ChainSendError):
    """Raised when a transfer never reaches the awaited state."""

    def __init__(self, transfer_id: Optional[str], target_state: str, attempts: int) -> None:
        self.transfer_id = transfer_id
        self.target_state = target_state
        self.attempts = attempts
        super().__init__(
            f"Transfer {transfer_id} still hasn't reached state={target_state} "
            f"after {attempts} attempts"
        )


class WaitCancelledError(ChainSendError):
    """Raised when a state wait is aborted through its cancellation token."""

    def __init__(self, transfer_id: Optional[str], target_state: str) -> None:
        self.transfer_id = transfer_id
        self.target_state = target_state
        super().__init__(
            f"Wait for transfer {transfer_id} to reach state={target_state} "
            "was cancelled"
        )


class NotaryStateError(ChainSendError):
    """Raised when a notary coordinator operation is called out of order."""


class SchemaValidationError(ChainSendError):
    """Raised when a document fails validation against a shared schema."""

    def __init__(self, schema: str, message: str) -> None:
        self.schema = schema
        super().__init__(f"{schema} schema validation error: {message}")
