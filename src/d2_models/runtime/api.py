"""
Remote api access.

``RemoteApi`` is the capability model definitions call through. ``HttpApi``
implements it over ``httpx.AsyncClient``; tests and other transports can
provide any object with the same coroutine methods.

Failed requests raise RemoteOperationError carrying the decoded response
body, which callers see unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from d2_models.config import ApiConfig
from d2_models.errors import RemoteOperationError

logger = logging.getLogger(__name__)


class RemoteApi(Protocol):
    """Asynchronous path-based access to the remote api."""

    async def get(self, path: str, options: dict[str, Any] | None = None) -> Any: ...

    async def post(self, path: str, data: dict[str, Any]) -> Any: ...

    async def update(self, path: str, data: dict[str, Any]) -> Any: ...

    async def delete(self, path: str) -> Any: ...


class HttpApi:
    """
    RemoteApi over HTTP.

    Args:
        config: Connection settings (defaults to ``ApiConfig.from_env()``)
        client: Pre-built client, mainly for tests (``httpx.MockTransport``)

    Usage::

        async with HttpApi(ApiConfig(base_url="https://play.example.org/api")) as api:
            definitions = await load_model_definitions(api)
            data_element = await definitions.dataElement.get("fbfJHSPpUQD")
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or ApiConfig.from_env()
        self._client = client or httpx.AsyncClient(
            auth=self.config.auth,
            timeout=self.config.timeout,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> HttpApi:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, path: str, options: dict[str, Any] | None = None) -> Any:
        return await self._request("GET", path, params=options)

    async def post(self, path: str, data: dict[str, Any]) -> Any:
        return await self._request("POST", path, json=data)

    async def update(self, path: str, data: dict[str, Any]) -> Any:
        return await self._request("PUT", path, json=data)

    async def delete(self, path: str) -> Any:
        return await self._request("DELETE", path)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self.config.base_url + "/" + path.lstrip("/")
        logger.debug("%s %s", method, url)
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteOperationError(str(e)) from e

        data = _decode(response)
        if response.is_error:
            raise RemoteOperationError(data, status_code=response.status_code)
        return data


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
