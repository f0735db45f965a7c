"""Attaching execution/cancellation conditions and expiries to a transfer chain.

Two settlement modes are supported:

- atomic: a notary case arbitrates the outcome. Every transfer carries the
  shared execution and cancellation conditions plus the case id, and no
  per-transfer expiry.
- universal: no notary. Every transfer carries the shared execution condition
  and an expiry derived from a single captured ``now``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.entities import Transfer
from ..domain.errors import ConditionConfigError
from .chain import PaymentChain

logger = logging.getLogger(__name__)

Authorizer = Callable[[Transfer], None]


class ExpiryPolicy(BaseModel):
    """Expiry offsets for universal mode, in seconds.

    The final transfer expires ``destination_expiry_duration`` after ``now``.
    Every other transfer gets an extra ``min_message_window`` so a fulfillment
    observed on the next hop still has time to travel back before expiry.
    """

    model_config = ConfigDict(frozen=True)

    destination_expiry_duration: float = Field(default=5.0, gt=0)
    min_message_window: float = Field(default=1.0, gt=0)

    def expires_at(self, now: datetime, is_final_transfer: bool) -> datetime:
        duration = self.destination_expiry_duration
        if not is_final_transfer:
            duration += self.min_message_window
        return now + timedelta(seconds=duration)


class AtomicParams(BaseModel):
    """Notary-mediated settlement."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["atomic"] = "atomic"
    cancellation_condition: str = Field(..., min_length=1)
    case_id: str = Field(..., min_length=1)


class UniversalParams(BaseModel):
    """Expiry-based settlement anchored on one captured instant."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["universal"] = "universal"
    now: datetime
    expiry_policy: ExpiryPolicy = Field(default_factory=ExpiryPolicy)

    @field_validator("now")
    @classmethod
    def validate_now(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            raise ValueError("now must be timezone-aware")
        return v

    @classmethod
    def capture(cls, expiry_policy: Optional[ExpiryPolicy] = None) -> "UniversalParams":
        """Capture the current instant once for the whole chain."""
        now = datetime.now(timezone.utc)
        if expiry_policy is None:
            return cls(now=now)
        return cls(now=now, expiry_policy=expiry_policy)


ConditionParams = Union[AtomicParams, UniversalParams]


def mark_first_debit_authorized(transfer: Transfer) -> None:
    """Default authorization step: flag the first debit as authorized.

    This stands in for a genuine authorization from the paying user.
    """
    transfer.debits[0].authorized = True


def setup_transfer_conditions_atomic(
    transfer: Transfer, execution_condition: str, params: AtomicParams
) -> None:
    transfer.execution_condition = execution_condition
    transfer.cancellation_condition = params.cancellation_condition
    transfer.cases = [params.case_id]
    transfer.expires_at = None


def setup_transfer_conditions_universal(
    transfer: Transfer,
    execution_condition: str,
    params: UniversalParams,
    is_final_transfer: bool,
) -> None:
    transfer.execution_condition = execution_condition
    transfer.cancellation_condition = None
    transfer.cases = None
    transfer.expires_at = params.expiry_policy.expires_at(params.now, is_final_transfer)


def setup_conditions(
    chain: PaymentChain,
    params: ConditionParams,
    execution_condition: str,
    authorize: Authorizer = mark_first_debit_authorized,
) -> PaymentChain:
    """Add conditions/expirations to every transfer of ``chain``.

    Raises:
        ConditionConfigError: If ``params`` is not a settlement mode or the
            execution condition is empty. Nothing is mutated in that case.
    """
    if not execution_condition:
        raise ConditionConfigError("An execution condition is required")
    if not isinstance(params, (AtomicParams, UniversalParams)):
        raise ConditionConfigError(
            f"Unsupported condition parameters: {type(params).__name__}"
        )

    transfers = chain.to_transfers()
    final_transfer = transfers[-1]
    for transfer in transfers:
        if isinstance(params, AtomicParams):
            setup_transfer_conditions_atomic(transfer, execution_condition, params)
        else:
            setup_transfer_conditions_universal(
                transfer,
                execution_condition,
                params,
                is_final_transfer=transfer is final_transfer,
            )

    # The first transfer is submitted by us with authorization.
    authorize(transfers[0])
    logger.info(
        "Attached %s conditions to %d transfers", params.mode, len(transfers)
    )
    return chain
