from __future__ import annotations

from typing import Any, Optional, Type
from types import TracebackType

import httpx


class AsyncHttpClient:
    """Thin asynchronous HTTP client wrapper around httpx.AsyncClient.

    - Resolves paths against an optional base URL; absolute URIs pass through,
      since ledger and notary resources are addressed by their full ids.
    - Applies a default timeout.
    - Leaves status handling to the service clients, which map failures to
      their own domain errors.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self._client.get(self._url(path), **kwargs)

    async def put(
        self,
        path: str,
        *,
        json: Optional[Any] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        return await self._client.put(self._url(path), json=json, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.aclose()


def response_body(resp: httpx.Response) -> Any:
    """Decoded JSON body, falling back to text for non-JSON error pages."""
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text
