"""chainsend: multi-hop conditional payments across independent ledgers."""

from .application.chain import PaymentChain, setup_transfers, to_transfers
from .application.conditions import (
    AtomicParams,
    ExpiryPolicy,
    UniversalParams,
    setup_conditions,
)
from .application.notary import NotaryCoordinator, NotaryState
from .application.poller import CancellationToken, TransferStatePoller
from .application.sender import PaymentSender, SendResult
from .application.submission import post_payments, post_transfers
from .domain.entities import Payment, SourceCredentials, Transfer

__all__ = [
    "AtomicParams",
    "CancellationToken",
    "ExpiryPolicy",
    "NotaryCoordinator",
    "NotaryState",
    "Payment",
    "PaymentChain",
    "PaymentSender",
    "SendResult",
    "SourceCredentials",
    "Transfer",
    "TransferStatePoller",
    "UniversalParams",
    "post_payments",
    "post_transfers",
    "setup_conditions",
    "setup_transfers",
    "to_transfers",
]
