"""Coordinating atomic settlement with a notary.

A coordinator drives one case through ``NO_CASE -> CASE_PROPOSED ->
FULFILLMENT_POSTED``: it proposes a case naming every transfer's fulfillment
endpoint, then forwards the final transfer's fulfillment once that transfer
is prepared.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence
from uuid import uuid4

from ..domain.entities import Case, Fulfillment, NotaryRef, Transfer
from ..domain.errors import NotaryStateError
from ..domain.shared import NotaryClientProtocol
from .poller import CancellationToken, TransferStatePoller

logger = logging.getLogger(__name__)

PREPARED = "prepared"


class NotaryState(str, Enum):
    NO_CASE = "no_case"
    CASE_PROPOSED = "case_proposed"
    FULFILLMENT_POSTED = "fulfillment_posted"


def transfer_to_fulfillment_uri(transfer: Transfer) -> str:
    return f"{transfer.id}/fulfillment"


def new_case_id(notary: str) -> str:
    return f"{notary.rstrip('/')}/cases/{uuid4()}"


class NotaryCoordinator:
    """Registers a case with a notary and forwards the chain's fulfillment."""

    def __init__(
        self, notary_client: NotaryClientProtocol, poller: TransferStatePoller
    ) -> None:
        self.notary_client = notary_client
        self.poller = poller
        self.state = NotaryState.NO_CASE
        self.case_id: Optional[str] = None

    def _require(self, expected: NotaryState, operation: str) -> None:
        if self.state is not expected:
            raise NotaryStateError(
                f"Cannot {operation} in state {self.state.value}; "
                f"expected {expected.value}"
            )

    async def setup_case(
        self,
        notary: str,
        receipt_condition: str,
        transfers: Sequence[Transfer],
        expires_at: datetime,
    ) -> str:
        """Propose a case covering ``transfers`` and return its id."""
        self._require(NotaryState.NO_CASE, "set up a case")
        case = Case(
            id=new_case_id(notary),
            state="proposed",
            execution_condition=receipt_condition,
            expires_at=expires_at,
            notaries=[NotaryRef(url=notary)],
            notification_targets=[transfer_to_fulfillment_uri(t) for t in transfers],
        )
        await self.notary_client.put_case(case)
        self.case_id = case.id
        self.state = NotaryState.CASE_PROPOSED
        logger.info("Proposed case %s for %d transfers", case.id, len(transfers))
        return case.id

    async def post_fulfillment(
        self,
        final_transfer: Transfer,
        case_id: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Fulfillment:
        """Wait for ``final_transfer`` to be prepared, then hand its proof to the notary.

        ``TransferStateTimeoutError`` from the poller propagates unchanged and
        leaves the coordinator in ``CASE_PROPOSED``.
        """
        self._require(NotaryState.CASE_PROPOSED, "post a fulfillment")
        case_id = case_id or self.case_id
        assert case_id is not None
        receipt = await self.poller.wait_for_transfer_state(
            final_transfer, PREPARED, cancel_token
        )
        fulfillment = Fulfillment.from_receipt(receipt)
        await self.notary_client.put_fulfillment(case_id, fulfillment)
        self.state = NotaryState.FULFILLMENT_POSTED
        logger.info("Posted fulfillment of %s to case %s", final_transfer.id, case_id)
        return fulfillment
