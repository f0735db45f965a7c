"""Unit tests for linking payments into a transfer chain."""

from __future__ import annotations

import re

import pytest

from chainsend.application.chain import (
    PaymentChain,
    setup_transfers,
    to_final_transfer,
    to_first_transfer,
    to_transfers,
)
from chainsend.domain.entities import Funds, Payment, Transfer
from chainsend.domain.errors import InvalidPaymentShapeError

UUID_RE = r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}"


class TestSetupTransfers:
    """Test setup_transfers."""

    @pytest.mark.parametrize("count", [1, 2, 3, 5])
    def test_chain_has_one_more_transfer_than_payments(
        self, make_payments, count: int
    ) -> None:
        payments = make_payments(count)
        chain = setup_transfers(payments, "acct://A")

        assert len(chain.to_transfers()) == count + 1
        assert len(to_transfers(payments)) == count + 1

    def test_adjacent_payments_share_one_transfer(self, make_payments) -> None:
        payments = make_payments(4)
        setup_transfers(payments, "acct://A")

        for i in range(1, len(payments)):
            assert (
                payments[i - 1].destination_transfers[0]
                is payments[i].source_transfers[0]
            )

    def test_mutation_is_visible_through_both_slots(self, make_payments) -> None:
        payments = make_payments(2)
        setup_transfers(payments, "acct://A")

        payments[0].destination_transfers[0].execution_condition = "cc:0:3:abc:2"

        assert payments[1].source_transfers[0].execution_condition == "cc:0:3:abc:2"

    def test_first_debit_gets_source_account(self, make_payments) -> None:
        payments = make_payments(3)
        setup_transfers(payments, "acct://A")

        assert to_first_transfer(payments).debits[0].account == "acct://A"

    def test_linked_transfer_takes_previous_destination_debits(
        self, make_payments
    ) -> None:
        payments = make_payments(2)
        expected_debits = payments[0].destination_transfers[0].debits

        setup_transfers(payments, "acct://A")

        assert payments[1].source_transfers[0].debits is expected_debits
        assert payments[1].source_transfers[0].ledger == "http://ledger-1.example"

    def test_ids_are_scoped_to_ledgers_and_unique(self, make_payments) -> None:
        payments = make_payments(3)
        chain = setup_transfers(payments, "acct://A")

        ids = [t.id for t in chain.to_transfers()]
        assert len(set(ids)) == len(ids)
        for transfer in chain.to_transfers():
            assert re.fullmatch(
                re.escape(transfer.ledger) + "/transfers/" + UUID_RE, transfer.id
            )

    def test_back_references_point_to_owning_payment(self, make_payments) -> None:
        payments = make_payments(3)
        chain = setup_transfers(payments, "acct://A")

        for i, payment in enumerate(payments):
            assert chain.transfers[i].additional_info == {"part_of_payment": payment.id}
        assert chain.final_transfer.additional_info == {
            "part_of_payment": payments[-1].id
        }

    def test_single_payment_gets_first_and_final_ids(self, make_payments) -> None:
        payments = make_payments(1)
        chain = setup_transfers(payments, "acct://A")

        assert chain.first_transfer.id is not None
        assert chain.final_transfer.id is not None
        assert chain.first_transfer is not chain.final_transfer
        assert to_final_transfer(payments) is chain.final_transfer

    def test_payments_are_mutated_in_place(self, make_payments) -> None:
        payments = make_payments(2)
        chain = setup_transfers(payments, "acct://A")

        assert chain.payments is payments

    def test_empty_payment_list_raises(self) -> None:
        with pytest.raises(ValueError, match="at least one payment"):
            setup_transfers([], "acct://A")


class TestOneToOneValidation:
    """Payments must have exactly one source and one destination transfer."""

    def _two_sources(self, make_payments) -> list[Payment]:
        payments = make_payments(3)
        payments[1].source_transfers.append(
            Transfer(ledger="http://ledger-1.example", debits=[Funds(amount="1")])
        )
        return payments

    def test_extra_source_transfer_raises(self, make_payments) -> None:
        payments = self._two_sources(make_payments)

        with pytest.raises(InvalidPaymentShapeError) as exc_info:
            setup_transfers(payments, "acct://A")
        assert exc_info.value.payment_id == payments[1].id

    def test_missing_destination_transfer_raises(self, make_payments) -> None:
        payments = make_payments(2)
        payments[1].destination_transfers.clear()

        with pytest.raises(InvalidPaymentShapeError):
            setup_transfers(payments, "acct://A")

    def test_invalid_shape_mutates_nothing(self, make_payments) -> None:
        payments = self._two_sources(make_payments)
        before = [p.model_dump() for p in payments]
        destination_of_first = payments[0].destination_transfers[0]

        with pytest.raises(InvalidPaymentShapeError):
            setup_transfers(payments, "acct://A")

        assert [p.model_dump() for p in payments] == before
        assert payments[0].destination_transfers[0] is destination_of_first


class TestPaymentChain:
    """Test the indexed chain view."""

    def test_indices(self, make_payments) -> None:
        chain = setup_transfers(make_payments(3), "acct://A")

        for i, payment in enumerate(chain.payments):
            assert chain.transfers[chain.source_index(i)] is payment.source_transfers[0]
            assert (
                chain.transfers[chain.destination_index(i)]
                is payment.destination_transfers[0]
            )

    def test_replace_transfer_updates_every_observing_slot(self, make_payments) -> None:
        chain = setup_transfers(make_payments(3), "acct://A")
        middle = chain.transfers[1]
        updated = middle.model_copy(update={"execution_condition": "cc:new"})

        chain.replace_transfer(updated)

        assert chain.transfers[1] is updated
        assert chain.payments[0].destination_transfers[0] is updated
        assert chain.payments[1].source_transfers[0] is updated
        assert chain.payments[0].destination_transfers[0] is (
            chain.payments[1].source_transfers[0]
        )

    def test_replace_final_transfer(self, make_payments) -> None:
        chain = setup_transfers(make_payments(2), "acct://A")
        updated = chain.final_transfer.model_copy()

        chain.replace_transfer(updated)

        assert chain.final_transfer is updated
        assert chain.payments[-1].destination_transfers[0] is updated

    def test_replace_unknown_transfer_is_ignored(self, make_payments) -> None:
        chain = setup_transfers(make_payments(2), "acct://A")
        before = chain.to_transfers()

        chain.replace_transfer(
            Transfer(id="http://elsewhere.example/transfers/x", ledger="http://x")
        )

        assert chain.to_transfers() == before

    def test_empty_chain_raises(self) -> None:
        with pytest.raises(ValueError):
            PaymentChain([])
