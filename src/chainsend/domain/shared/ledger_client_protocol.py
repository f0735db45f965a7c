"""Protocol interfaces for ledger and notary client implementations.

These protocols define the contract the application layer relies on. They
enable dependency injection and make the coordination code testable with
in-memory implementations.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    # Avoid circular imports by only importing types during type checking
    from ..entities import (
        Case,
        Fulfillment,
        Payment,
        SourceCredentials,
        Transfer,
        TransferStateReceipt,
    )


class LedgerClientProtocol(Protocol):
    """Interface for talking to ledgers' transfer and payment resources."""

    async def put_transfer(
        self,
        transfer: "Transfer",
        credentials: Optional["SourceCredentials"] = None,
    ) -> dict[str, Any]:
        """Propose a transfer on its ledger.

        Args:
            transfer: Transfer whose ``id`` is the resource URI
            credentials: Basic-auth credentials, only for the first hop

        Returns:
            The ledger's response body.

        Raises:
            RemoteLedgerError: If the ledger answers with status >= 400
        """
        ...

    async def get_transfer_state(self, transfer: "Transfer") -> "TransferStateReceipt":
        """Fetch the signed current state of a transfer."""
        ...

    async def put_payment(self, payment: "Payment") -> dict[str, Any]:
        """Upsert a full payment document at ``payment.id``."""
        ...


class NotaryClientProtocol(Protocol):
    """Interface for talking to a notary's case resources."""

    async def put_case(self, case: "Case") -> dict[str, Any]:
        """Create a case at ``case.id``.

        Raises:
            RemoteNotaryError: If the notary answers with status >= 400
        """
        ...

    async def put_fulfillment(
        self, case_id: str, fulfillment: "Fulfillment"
    ) -> dict[str, Any]:
        """Submit the execution condition fulfillment for a case."""
        ...
