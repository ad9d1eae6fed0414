from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Mapping, Optional, Sequence, Union, overload

import httpx
from httpx import BaseTransport, Limits, Response
from typing_extensions import Required, TypedDict

logger = logging.getLogger(__name__)
PrimitiveData = Optional[Union[str, int, float, bool]]
QueryParams = Mapping[str, Union[PrimitiveData, Sequence[PrimitiveData]]]
Headers = Dict[str, str]


class HttpxPostKwargs(TypedDict, total=False):
    url: Required[str]
    json: Required[Any]
    headers: Required[Headers]
    params: QueryParams
    timeout: Optional[int]


class HttpClient:
    """
    A class representing an HTTP client.

    Failed requests are never retried, the caller decides what a failure means.

    Args:
        timeout (int | None, optional): The timeout value for requests in seconds. Defaults to 120.
        limits (Limits | None, optional): The limits for the HTTP client. Defaults to None.
        transport (BaseTransport | None, optional): A custom transport, mostly for tests. Defaults to None.
    """

    def __init__(
        self,
        timeout: int | None = 120,
        limits: Limits | None = None,
        transport: BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._limits = limits or Limits(max_connections=100, max_keepalive_connections=20, keepalive_expiry=600)
        self._transport = transport
        self.client = self.create_httpx_client(is_async=False)
        self.async_client = self.create_httpx_client(is_async=True)

    @overload
    def create_httpx_client(self, is_async: Literal[False]) -> httpx.Client:
        ...

    @overload
    def create_httpx_client(self, is_async: Literal[True]) -> httpx.AsyncClient:
        ...

    def create_httpx_client(self, is_async: bool) -> httpx.AsyncClient | httpx.Client:
        if is_async:
            return httpx.AsyncClient(timeout=self._timeout, limits=self._limits, transport=self._transport)  # type: ignore
        return httpx.Client(timeout=self._timeout, limits=self._limits, transport=self._transport)

    def post(self, request_parameters: HttpxPostKwargs) -> Response:
        logger.debug(f'POST {request_parameters["url"]}')
        http_response = self.client.post(**request_parameters)  # type: ignore
        http_response.raise_for_status()
        logger.debug(f'Response {http_response}')
        return http_response

    async def async_post(self, request_parameters: HttpxPostKwargs) -> Response:
        logger.debug(f'POST {request_parameters["url"]}')
        http_response = await self.async_client.post(**request_parameters)  # type: ignore
        http_response.raise_for_status()
        logger.debug(f'Response {http_response}')
        return http_response
