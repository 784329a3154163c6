"""
Request descriptors and the pipeline's working copy.

A `RequestDescriptor` is what callers hand to the client; it is never mutated.
The pipeline copies it into a `PreparedRequest`, which interceptors and the
default request stage are free to modify before the transport call.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

import httpx

from ..types import ResponseType, Scalar

QueryParams: TypeAlias = Mapping[str, Scalar | None]
RequestInterceptor: TypeAlias = Callable[["PreparedRequest"], "PreparedRequest"]


@dataclass(slots=True)
class FormData:
    """
    Multipart form container.

    Fields are kept in insertion order. A payload that is already a `FormData`
    is sent as-is and never re-converted.
    """

    fields: list[tuple[str, str]] = field(default_factory=list)
    files: list[tuple[str, Any]] = field(default_factory=list)

    def append(self, name: str, value: Any) -> None:
        self.fields.append((name, str(value)))

    def add_file(self, name: str, file: Any) -> None:
        """Attach a file in any shape `httpx` accepts (bytes, file object or tuple)."""
        self.files.append((name, file))

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> FormData:
        # Values are coerced with str() and not validated; nested values keep
        # their default string form.
        form = cls()
        for key, value in payload.items():
            form.append(key, value)
        return form

    def to_multipart(self) -> list[tuple[str, Any]]:
        parts: list[tuple[str, Any]] = [
            (name, (None, value.encode("utf-8"))) for name, value in self.fields
        ]
        parts.extend(self.files)
        return parts


@dataclass(frozen=True, slots=True)
class RequestInterceptors:
    """Per-call interceptor overrides. Only the request side is applied per call."""

    request: RequestInterceptor | None = None


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    path: str
    method: str = "GET"
    params: QueryParams | None = None
    data: Any | None = None
    headers: Mapping[str, str] | None = None
    response_type: ResponseType = "json"
    interceptors: RequestInterceptors | None = None


@dataclass(slots=True)
class PreparedRequest:
    method: str
    path: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    params: dict[str, Scalar | None] = field(default_factory=dict)
    data: Any | None = None
    response_type: ResponseType = "json"
    # Encoded transport body, filled in by the default request stage.
    json: Any | None = None
    content: str | bytes | None = None
    files: list[tuple[str, Any]] | None = None

    @classmethod
    def from_descriptor(cls, descriptor: RequestDescriptor) -> PreparedRequest:
        return cls(
            method=descriptor.method.upper(),
            path=descriptor.path,
            headers=httpx.Headers(dict(descriptor.headers or {})),
            params=dict(descriptor.params or {}),
            data=descriptor.data,
            response_type=descriptor.response_type,
        )
