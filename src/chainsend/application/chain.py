"""Linking one-to-one payments into a single transfer chain."""

from __future__ import annotations

import logging
from typing import Sequence
from uuid import uuid4

from ..domain.entities import Payment, Transfer
from ..domain.errors import InvalidPaymentShapeError

logger = logging.getLogger(__name__)


def new_transfer_id(ledger: str) -> str:
    return f"{ledger.rstrip('/')}/transfers/{uuid4()}"


def validate_one_to_one_payment(payment: Payment) -> None:
    if not payment.is_one_to_one():
        raise InvalidPaymentShapeError(payment.id)


def to_transfers(payments: Sequence[Payment]) -> list[Transfer]:
    """Chain-ordered transfers: every source transfer, then the final destination."""
    return [payment.source_transfers[0] for payment in payments] + [
        payments[-1].destination_transfers[0]
    ]


def to_first_transfer(payments: Sequence[Payment]) -> Transfer:
    return payments[0].source_transfers[0]


def to_final_transfer(payments: Sequence[Payment]) -> Transfer:
    return payments[-1].destination_transfers[0]


class PaymentChain:
    """Indexed view over a linked list of payments.

    ``transfers`` is the arena: payment ``i`` observes index ``i`` as its
    source transfer and index ``i + 1`` as its destination transfer. Writes
    through :meth:`replace_transfer` update the arena slot and every payment
    slot observing it, so adjacent payments keep sharing one transfer.
    """

    def __init__(self, payments: list[Payment]) -> None:
        if not payments:
            raise ValueError("A payment chain needs at least one payment")
        self.payments = payments
        self.transfers = to_transfers(payments)

    def __len__(self) -> int:
        return len(self.transfers)

    @property
    def first_transfer(self) -> Transfer:
        return self.transfers[0]

    @property
    def final_transfer(self) -> Transfer:
        return self.transfers[-1]

    def to_transfers(self) -> list[Transfer]:
        return list(self.transfers)

    def source_index(self, payment_index: int) -> int:
        return payment_index

    def destination_index(self, payment_index: int) -> int:
        return payment_index + 1

    def index_of(self, transfer_id: str) -> int | None:
        for index, transfer in enumerate(self.transfers):
            if transfer.id == transfer_id:
                return index
        return None

    def replace_transfer(self, updated: Transfer) -> None:
        """Replace the transfer sharing ``updated.id`` wherever the chain shows it."""
        if updated.id is None:
            return
        index = self.index_of(updated.id)
        if index is None:
            return
        if updated.ledger_state is None:
            updated.ledger_state = self.transfers[index].ledger_state
        self.transfers[index] = updated
        if index < len(self.payments):
            self.payments[index].source_transfers[0] = updated
        if index > 0:
            self.payments[index - 1].destination_transfers[0] = updated


def setup_transfers(payments: list[Payment], source_account: str) -> PaymentChain:
    """Link ``payments`` into one continuous chain, mutating them in place.

    Every payment's shape is checked before anything is touched, so a bad
    payment anywhere in the list leaves the whole list unmodified.

    The loop only assigns ids to source transfers because after linking
    ``payments[i-1].destination_transfers[0] is payments[i].source_transfers[0]``.
    The final (rightmost) transfer is updated at the end.
    """
    if not payments:
        raise ValueError("A payment chain needs at least one payment")
    for payment in payments:
        validate_one_to_one_payment(payment)
    if not to_first_transfer(payments).debits:
        raise ValueError("The first transfer must have at least one debit")

    for i, payment in enumerate(payments):
        transfer = payment.source_transfers[0]
        transfer.id = new_transfer_id(transfer.ledger)
        transfer.additional_info = {"part_of_payment": payment.id}
        if i == 0:
            transfer.debits[0].account = source_account
        else:
            previous = payments[i - 1]
            transfer.debits = previous.destination_transfers[0].debits
            previous.destination_transfers[0] = transfer

    final_payment = payments[-1]
    final_transfer = final_payment.destination_transfers[0]
    final_transfer.id = new_transfer_id(final_transfer.ledger)
    final_transfer.additional_info = {"part_of_payment": final_payment.id}

    chain = PaymentChain(payments)
    logger.info(
        "Linked %d payment(s) into a chain of %d transfers", len(payments), len(chain)
    )
    return chain
