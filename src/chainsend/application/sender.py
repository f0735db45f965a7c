"""End-to-end sending of a multi-hop payment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..domain.entities import Payment, SourceCredentials
from ..domain.errors import ConditionConfigError
from ..domain.shared import LedgerClientProtocol, NotaryClientProtocol
from ..envs.sender_env import Settings, get_settings
from .chain import PaymentChain, setup_transfers
from .conditions import (
    AtomicParams,
    Authorizer,
    ConditionParams,
    UniversalParams,
    mark_first_debit_authorized,
    setup_conditions,
)
from .notary import NotaryCoordinator
from .poller import CancellationToken, TransferStatePoller
from .submission import post_transfers

logger = logging.getLogger(__name__)


@dataclass
class SendResult:
    chain: PaymentChain
    case_id: Optional[str] = None


class PaymentSender:
    """Builds, conditions and submits a payment chain.

    With a notary the chain settles atomically through a notary case;
    without one every transfer gets an expiry (universal mode).
    """

    def __init__(
        self,
        ledger: LedgerClientProtocol,
        notary_client: Optional[NotaryClientProtocol] = None,
        settings: Optional[Settings] = None,
        authorize: Authorizer = mark_first_debit_authorized,
    ) -> None:
        self.ledger = ledger
        self.notary_client = notary_client
        self.settings = settings or get_settings()
        self.authorize = authorize

    def _poller(self) -> TransferStatePoller:
        return TransferStatePoller(
            self.ledger,
            attempts=self.settings.poll_attempts,
            interval=self.settings.poll_interval,
        )

    async def send(
        self,
        payments: list[Payment],
        source_account: str,
        credentials: SourceCredentials,
        execution_condition: str,
        cancellation_condition: Optional[str] = None,
        notary: Optional[str] = None,
        case_expires_at: Optional[datetime] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> SendResult:
        """Send ``payments`` as one chain starting at ``source_account``.

        Raises:
            ConditionConfigError: If only one of ``notary`` and
                ``cancellation_condition`` is given, or no notary client is
                configured for an atomic payment. Raised before any remote call.
        """
        is_atomic = notary is not None
        if is_atomic != (cancellation_condition is not None):
            raise ConditionConfigError(
                "A notary and a cancellation condition must be given together"
            )
        if is_atomic and self.notary_client is None:
            raise ConditionConfigError("Atomic payments need a notary client")

        chain = setup_transfers(payments, source_account)

        coordinator: Optional[NotaryCoordinator] = None
        case_id: Optional[str] = None
        params: ConditionParams
        if is_atomic:
            assert notary is not None and cancellation_condition is not None
            assert self.notary_client is not None
            coordinator = NotaryCoordinator(self.notary_client, self._poller())
            expires_at = case_expires_at or datetime.now(timezone.utc) + timedelta(
                seconds=self.settings.case_expiry_duration
            )
            case_id = await coordinator.setup_case(
                notary, execution_condition, chain.to_transfers(), expires_at
            )
            params = AtomicParams(
                cancellation_condition=cancellation_condition, case_id=case_id
            )
        else:
            params = UniversalParams.capture(self.settings.expiry_policy())

        setup_conditions(chain, params, execution_condition, authorize=self.authorize)
        await post_transfers(chain, self.ledger, credentials)

        if coordinator is not None:
            await coordinator.post_fulfillment(
                chain.final_transfer, case_id, cancel_token=cancel_token
            )
        logger.info("Sent %s payment chain of %d transfers", params.mode, len(chain))
        return SendResult(chain=chain, case_id=case_id)
