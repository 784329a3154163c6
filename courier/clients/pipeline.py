"""
Request-side interceptor pipeline.

Each call runs an optional per-call interceptor first and the default request
stage second, both synchronously and before the transport is touched. Because
the custom interceptor runs first, it can pre-set anything the default stage
leaves alone (e.g. its own Content-Type).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..auth import AuthContextProvider, bearer, is_anonymous_path
from ..config import ClientConfig
from ..encoding import apply_query, encode_body
from ..models.request import PreparedRequest, RequestDescriptor, RequestInterceptor

logger = logging.getLogger(__name__)


class DefaultRequestStage:
    """
    The request stage applied to every call.

    In order: bearer header injection (skipped for anonymous paths or an empty
    token), Content-Type defaulting, body encoding, and GET query flattening.
    """

    def __init__(self, config: ClientConfig, auth: AuthContextProvider) -> None:
        self._config = config
        self._auth = auth

    def __call__(self, req: PreparedRequest) -> PreparedRequest:
        req.method = req.method.upper()
        self._apply_auth(req)

        if "Content-Type" not in req.headers:
            req.headers["Content-Type"] = self._config.default_content_type

        encoded = encode_body(
            req.data,
            req.headers.get("Content-Type"),
            req.method,
            transform_multipart=self._config.transform_request_data,
        )
        req.json = encoded.json
        req.content = encoded.content
        req.files = encoded.files
        if encoded.is_multipart and "boundary=" not in req.headers.get("Content-Type", ""):
            # The transport generates the boundary only when no Content-Type is set.
            del req.headers["Content-Type"]

        if req.method == "GET":
            req.path = apply_query(req.path, req.params)
            req.params = {}
        return req

    def _apply_auth(self, req: PreparedRequest) -> None:
        token = self._auth.get_token()
        if not token:
            return
        if is_anonymous_path(req.path, self._config.anonymous_paths):
            return
        req.headers[self._auth.get_token_header_name()] = bearer(token)


def compose(stages: Sequence[RequestInterceptor]) -> RequestInterceptor:
    """Chain request stages left to right into a single interceptor."""

    def _run(req: PreparedRequest) -> PreparedRequest:
        for stage in stages:
            req = stage(req)
        return req

    return _run


def prepare(descriptor: RequestDescriptor, default_stage: RequestInterceptor) -> PreparedRequest:
    """Copy `descriptor` and run the custom interceptor (if any) then the default stage."""
    stages: list[RequestInterceptor] = []
    if descriptor.interceptors is not None and descriptor.interceptors.request is not None:
        stages.append(descriptor.interceptors.request)
    stages.append(default_stage)
    prepared = compose(stages)(PreparedRequest.from_descriptor(descriptor))
    logger.debug("Prepared %s %s", prepared.method, prepared.path)
    return prepared
