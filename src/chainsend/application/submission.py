"""Submitting a conditioned chain to the ledgers.

Both submitters are strictly sequential: a ledger may only authorize a
transfer once the preceding transfer of the chain exists.
"""

from __future__ import annotations

import logging

from ..domain.entities import SourceCredentials, Transfer
from ..domain.shared import LedgerClientProtocol
from .chain import PaymentChain

logger = logging.getLogger(__name__)


async def post_transfers(
    chain: PaymentChain,
    ledger: LedgerClientProtocol,
    credentials: SourceCredentials,
) -> PaymentChain:
    """Propose every transfer of ``chain`` in order.

    The first transfer is sent with the source account's credentials; the
    ledgers infer authorization of the others from the chain. Each ledger
    response is stored as the transfer's ``ledger_state``.

    Raises:
        RemoteLedgerError: On the first rejected transfer. Transfers before it
            stay as the ledgers recorded them.
    """
    transfers = chain.to_transfers()
    first_transfer = transfers[0]
    first_transfer.ledger_state = await ledger.put_transfer(first_transfer, credentials)

    for transfer in transfers[1:]:
        transfer.ledger_state = await ledger.put_transfer(transfer)

    logger.info("Proposed %d transfers", len(transfers))
    return chain


async def post_payments(
    chain: PaymentChain,
    ledger: LedgerClientProtocol,
) -> PaymentChain:
    """Upsert every payment document in order.

    The endpoint's view of each payment's destination transfer (possibly
    enriched with conditions or state) replaces that transfer everywhere in
    the chain, so the next payment is sent with it as its source.

    Raises:
        RemoteLedgerError: If a payment endpoint answers with status >= 400.
    """
    for payment in chain.payments:
        body = await ledger.put_payment(payment)
        destination_transfers = (body or {}).get("destination_transfers") or []
        if not destination_transfers:
            logger.debug("Payment %s returned no destination transfer", payment.id)
            continue
        chain.replace_transfer(Transfer.model_validate(destination_transfers[0]))
    logger.info("Posted %d payments", len(chain.payments))
    return chain
