from __future__ import annotations

import logging
from typing import Any, Optional, Type
from types import TracebackType

import httpx

from ...domain.entities import Case, Fulfillment
from ...domain.errors import RemoteNotaryError
from ..http.http_client import AsyncHttpClient, response_body

logger = logging.getLogger(__name__)


class AsyncNotaryClient:
    """Asynchronous client for a notary's case resources."""

    def __init__(
        self,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = AsyncHttpClient(timeout=timeout, transport=transport)

    async def _put(self, url: str, document: dict[str, Any]) -> Any:
        resp = await self._http.put(url, json=document)
        body = response_body(resp)
        if resp.status_code >= 400:
            raise RemoteNotaryError(resp.status_code, body, url=url)
        return body

    async def put_case(self, case: Case) -> Any:
        logger.debug("PUT case %s", case.id)
        return await self._put(case.id, case.model_dump())

    async def put_fulfillment(self, case_id: str, fulfillment: Fulfillment) -> Any:
        logger.debug("PUT fulfillment for case %s", case_id)
        return await self._put(f"{case_id}/fulfillment", fulfillment.model_dump())

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AsyncNotaryClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()
