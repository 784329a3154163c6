"""
Main courier client.

Provides the single facade every caller uses to reach the backend.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from .auth import AuthContextProvider
from .clients.service import RequestService
from .config import ClientConfig
from .hooks import ErrorHook, RequestHook, ResponseHook
from .models.request import QueryParams, RequestDescriptor, RequestInterceptors
from .notify import Notifier
from .types import ResponseType


class RequestClient:
    """
    Asynchronous HTTP client facade.

    Every call goes through the same pipeline: per-call interceptor, default
    request stage (bearer header, Content-Type, body encoding, GET query
    flattening), in-flight tracking for cancellation, and response
    classification. Successful calls resolve to the response body as sent by
    the backend (enveloped or bare); blob calls resolve to the raw
    `httpx.Response`. Failures raise a `CourierError` subclass whose `body` is
    the backend's error body.

    Example:
        ```python
        from courier import ClientConfig, RequestClient, StaticAuthContext

        session = StaticAuthContext(token="abc")
        async with RequestClient(ClientConfig(base_url="https://api.example"), auth=session) as api:
            users = await api.get("/api/users", params={"page": 1, "search": None})
            await api.post("/api/users", data={"name": "John"})

            # Cancel whatever is in flight for a path, or everything
            api.cancel_request("/api/users")
            api.cancel_all_requests()
        ```
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        auth: AuthContextProvider,
        notifier: Notifier | None = None,
        on_request: RequestHook | None = None,
        on_response: ResponseHook | None = None,
        on_error: ErrorHook | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._config = config or ClientConfig()
        self._service = RequestService(
            self._config,
            auth=auth,
            notifier=notifier,
            on_request=on_request,
            on_response=on_response,
            on_error=on_error,
            http_client=http_client,
        )

    async def __aenter__(self) -> RequestClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client and release resources."""
        await self._service.aclose()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def in_flight(self) -> list[str]:
        """Keys of the calls currently tracked for cancellation."""
        return list(self._service.registry)

    # =========================================================================
    # Requests
    # =========================================================================

    async def request(self, descriptor: RequestDescriptor) -> Any:
        """Run a fully specified descriptor through the pipeline."""
        return await self._service.request(descriptor)

    async def get(
        self,
        path: str,
        *,
        params: QueryParams | None = None,
        headers: Mapping[str, str] | None = None,
        response_type: ResponseType = "json",
        interceptors: RequestInterceptors | None = None,
    ) -> Any:
        """
        Make a GET request.

        `params` are flattened into the path (None values dropped) before the
        call is registered, so the cancellation key includes the query string.
        """
        return await self._call(
            "GET",
            path,
            params=params,
            headers=headers,
            response_type=response_type,
            interceptors=interceptors,
        )

    async def post(
        self,
        path: str,
        *,
        data: Any | None = None,
        params: QueryParams | None = None,
        headers: Mapping[str, str] | None = None,
        response_type: ResponseType = "json",
        interceptors: RequestInterceptors | None = None,
    ) -> Any:
        """
        Make a POST request.

        Set `Content-Type` to `application/x-www-form-urlencoded` or
        `multipart/form-data` in `headers` to change the body encoding; JSON is
        the default.
        """
        return await self._call(
            "POST",
            path,
            data=data,
            params=params,
            headers=headers,
            response_type=response_type,
            interceptors=interceptors,
        )

    async def put(
        self,
        path: str,
        *,
        data: Any | None = None,
        params: QueryParams | None = None,
        headers: Mapping[str, str] | None = None,
        response_type: ResponseType = "json",
        interceptors: RequestInterceptors | None = None,
    ) -> Any:
        """Make a PUT request."""
        return await self._call(
            "PUT",
            path,
            data=data,
            params=params,
            headers=headers,
            response_type=response_type,
            interceptors=interceptors,
        )

    async def delete(
        self,
        path: str,
        *,
        data: Any | None = None,
        params: QueryParams | None = None,
        headers: Mapping[str, str] | None = None,
        response_type: ResponseType = "json",
        interceptors: RequestInterceptors | None = None,
    ) -> Any:
        """Make a DELETE request; `data`, when given, is sent as the body."""
        return await self._call(
            "DELETE",
            path,
            data=data,
            params=params,
            headers=headers,
            response_type=response_type,
            interceptors=interceptors,
        )

    async def _call(self, method: str, path: str, **kwargs: Any) -> Any:
        return await self._service.request(RequestDescriptor(path=path, method=method, **kwargs))

    # =========================================================================
    # Cancellation
    # =========================================================================

    def cancel_request(self, key: str | Iterable[str]) -> None:
        """
        Cancel the call(s) tracked under one key or a list of keys.

        Keys are request paths as sent (GET paths include their query string).
        Unknown keys are ignored.
        """
        self._service.cancel(key)

    def cancel_all_requests(self) -> None:
        """Cancel every tracked call and clear the registry."""
        self._service.cancel_all()
