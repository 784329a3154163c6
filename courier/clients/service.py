"""
Transport layer.

`RequestService` runs one descriptor end to end: request stages, in-flight
registration, the `httpx` call bound to its cancellation handle, and
classification. The public facade in `courier.client` sits on top of it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import httpx

from ..auth import AuthContextProvider
from ..config import ClientConfig
from ..exceptions import RequestCancelledError
from ..hooks import ErrorHook, RequestHook, ResponseHook
from ..models.request import PreparedRequest, RequestDescriptor
from ..notify import LoggingNotifier, Notifier
from .classifier import Cancelled, Outcome, ResponseClassifier
from .pipeline import DefaultRequestStage, prepare
from .registry import InFlightRegistry

logger = logging.getLogger(__name__)


class RequestService:
    """
    Executes requests through the pipeline.

    Args:
        config: Client configuration.
        auth: Session provider; its `logout()` is called on authentication failure.
        notifier: Sink for user-facing failure notices.
        on_request: Observes each prepared request before it is sent.
        on_response: Observes each raw response.
        on_error: Observes each transport error.
        http_client: Pre-built `httpx.AsyncClient`; when omitted one is created
            from `config` and closed by `aclose()`.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        auth: AuthContextProvider,
        notifier: Notifier | None = None,
        on_request: RequestHook | None = None,
        on_response: ResponseHook | None = None,
        on_error: ErrorHook | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._on_request = on_request
        self._on_response = on_response
        self._on_error = on_error
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout),
            transport=config.transport,
        )
        self._default_stage = DefaultRequestStage(config, auth)
        self.registry = InFlightRegistry(use_mock=config.use_mock)
        self.classifier = ResponseClassifier(
            notifier=notifier or LoggingNotifier(),
            on_auth_failure=auth.logout,
            success_code=config.success_code,
            auth_failure_code=config.auth_failure_code,
            discriminator=config.discriminator,
        )

    async def request(self, descriptor: RequestDescriptor) -> Any:
        prepared = prepare(descriptor, self._default_stage)
        if self._on_request is not None:
            self._on_request(prepared)

        key = self.registry.key_for(prepared.path)
        handle = self.registry.register(key)
        outcome: Outcome
        try:
            response = await handle.run(self._send(prepared))
        except RequestCancelledError:
            outcome = Cancelled(key)
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed: %r", prepared.method, prepared.path, exc)
            if self._on_error is not None:
                self._on_error(exc)
            outcome = self.classifier.classify_transport_error(exc)
        else:
            logger.debug("%s %s -> %d", prepared.method, prepared.path, response.status_code)
            if self._on_response is not None:
                self._on_response(response)
            outcome = self.classifier.classify_response(
                response, response_type=prepared.response_type
            )
        finally:
            self.registry.release(key)
        return self.classifier.settle(outcome)

    async def _send(self, req: PreparedRequest) -> httpx.Response:
        params = {k: v for k, v in req.params.items() if v is not None}
        request = self._client.build_request(
            req.method,
            req.path,
            headers=req.headers,
            params=params or None,
            json=req.json,
            content=req.content,
            files=req.files,
        )
        return await self._client.send(request)

    def cancel(self, keys: str | Iterable[str]) -> None:
        self.registry.cancel(keys)

    def cancel_all(self) -> None:
        self.registry.cancel_all()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
