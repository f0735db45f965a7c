"""Shared pytest fixtures for payment chain tests."""

from __future__ import annotations

from typing import Callable

import pytest

from chainsend.domain.entities import Funds, Payment, Transfer
from tests.fixtures import TestLedgerClient, TestNotaryClient

PaymentsFactory = Callable[[int], list[Payment]]


def ledger_uri(index: int) -> str:
    return f"http://ledger-{index}.example"


def build_payments(count: int, amount: str = "10") -> list[Payment]:
    """``count`` one-to-one payments hopping across ``count + 1`` ledgers.

    Payment ``i`` moves funds from ledger ``i`` to ledger ``i + 1`` through the
    connector ``conn-{i}``; the source and destination transfers of adjacent
    payments are separate objects until the chain is built.
    """
    payments = []
    for i in range(count):
        source = Transfer(
            ledger=ledger_uri(i),
            debits=[Funds(amount=amount)],
            credits=[Funds(account=f"{ledger_uri(i)}/accounts/conn-{i}", amount=amount)],
        )
        destination = Transfer(
            ledger=ledger_uri(i + 1),
            debits=[
                Funds(account=f"{ledger_uri(i + 1)}/accounts/conn-{i}", amount=amount)
            ],
            credits=[
                Funds(account=f"{ledger_uri(i + 1)}/accounts/hop-{i + 1}", amount=amount)
            ],
        )
        payments.append(
            Payment(
                id=f"http://conn-{i}.example/payments/p{i}",
                source_transfers=[source],
                destination_transfers=[destination],
            )
        )
    return payments


@pytest.fixture
def make_payments() -> PaymentsFactory:
    """Factory for unlinked one-to-one payments."""
    return build_payments


@pytest.fixture
def ledger_client() -> TestLedgerClient:
    return TestLedgerClient()


@pytest.fixture
def notary_client() -> TestNotaryClient:
    return TestNotaryClient()


class RecordingSleep:
    """Sleep stand-in that records requested durations and returns at once."""

    def __init__(self) -> None:
        self.durations: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.durations.append(seconds)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
