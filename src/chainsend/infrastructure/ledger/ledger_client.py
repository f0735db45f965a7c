from __future__ import annotations

import logging
from typing import Any, Optional, Type
from types import TracebackType

import httpx

from ...domain.entities import (
    Payment,
    SourceCredentials,
    Transfer,
    TransferStateReceipt,
)
from ...domain.errors import RemoteLedgerError
from ..http.http_client import AsyncHttpClient, response_body
from ..validator import validate_transfer

logger = logging.getLogger(__name__)


def _check(resp: httpx.Response) -> Any:
    body = response_body(resp)
    if resp.status_code >= 400:
        raise RemoteLedgerError(resp.status_code, body, url=str(resp.request.url))
    return body


class AsyncLedgerClient:
    """Asynchronous client for ledgers' transfer resources and payment endpoints.

    Resources are addressed by their full URIs (``transfer.id``,
    ``payment.id``), so one client serves every ledger of a chain.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = AsyncHttpClient(timeout=timeout, transport=transport)

    async def put_transfer(
        self,
        transfer: Transfer,
        credentials: Optional[SourceCredentials] = None,
    ) -> dict[str, Any]:
        """Propose ``transfer`` on its ledger and return the ledger's view of it.

        The document is validated against the shared Transfer schema before
        it is sent.
        """
        if transfer.id is None:
            raise ValueError("Transfer must have an id before it is submitted")
        document = transfer.to_document()
        validate_transfer(document)
        auth = None
        if credentials is not None:
            auth = httpx.BasicAuth(credentials.username, credentials.password)
        logger.debug("PUT transfer %s", transfer.id)
        resp = await self._http.put(transfer.id, json=document, auth=auth)
        return _check(resp)

    async def get_transfer_state(self, transfer: Transfer) -> TransferStateReceipt:
        """Fetch the ledger-signed receipt for the transfer's current state."""
        if transfer.id is None:
            raise ValueError("Transfer must have an id to fetch its state")
        resp = await self._http.get(f"{transfer.id}/state")
        return TransferStateReceipt.model_validate(_check(resp))

    async def put_payment(self, payment: Payment) -> dict[str, Any]:
        """Upsert the full payment document at ``payment.id``."""
        logger.debug("PUT payment %s", payment.id)
        resp = await self._http.put(payment.id, json=payment.to_document())
        return _check(resp)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AsyncLedgerClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()
