"""
Query-string and request-body encoding.

All functions here are pure: they never touch headers or the transport.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from .models.request import FormData, QueryParams
from .types import CONTENT_TYPE_FORM, CONTENT_TYPE_MULTIPART, FORM_BODY_METHODS

# encodeURIComponent leaves these unescaped in addition to alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True, slots=True)
class EncodedBody:
    """Transport-ready body; at most one of the three fields is set."""

    json: Any | None = None
    content: str | bytes | None = None
    files: list[tuple[str, Any]] | None = None

    @property
    def is_multipart(self) -> bool:
        return self.files is not None


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_query(params: QueryParams | None) -> str:
    """
    Serialize query parameters in insertion order.

    Keys whose value is None are skipped. Values are percent-encoded; keys are
    emitted as given.

    Example:
        >>> encode_query({"page": 1, "search": None, "status": "active"})
        'page=1&status=active'
    """
    if not params:
        return ""
    pairs = [
        f"{key}={quote(_scalar_text(value), safe=_URI_COMPONENT_SAFE)}"
        for key, value in params.items()
        if value is not None
    ]
    return "&".join(pairs)


def apply_query(path: str, params: QueryParams | None) -> str:
    """Append the encoded query to `path`; returns `path` unchanged when nothing remains."""
    query = encode_query(params)
    if not query:
        return path
    separator = "&" if "?" in path else "?"
    return f"{path}{separator}{query}"


def _flatten_form(prefix: str, value: Any, out: list[tuple[str, str]]) -> None:
    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten_form(f"{prefix}[{key}]", item, out)
        return
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        for index, item in enumerate(value):
            _flatten_form(f"{prefix}[{index}]", item, out)
        return
    out.append((prefix, "" if value is None else _scalar_text(value)))


def stringify_form(payload: Mapping[str, Any]) -> str:
    """
    Url-encode a (possibly nested) mapping.

    Nested mappings use bracket keys (`a[b]=c`) and sequences use indices
    (`a[0]=x`); None renders as an empty value.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in payload.items():
        _flatten_form(str(key), value, pairs)
    return "&".join(f"{quote(k, safe='')}={quote(v, safe='')}" for k, v in pairs)


def encode_body(
    payload: Any,
    content_type: str | None,
    method: str,
    *,
    transform_multipart: bool = True,
) -> EncodedBody:
    """
    Pick the wire encoding for a request body.

    - url-encoded content type on POST/PUT/PATCH: form string
    - multipart content type with a plain mapping: one form field per key
    - `FormData`: always multipart
    - anything else: unchanged (strings and bytes raw, other values as JSON)
    """
    if payload is None:
        return EncodedBody()
    mime = (content_type or "").split(";", 1)[0].strip().lower()

    if isinstance(payload, FormData):
        return EncodedBody(files=payload.to_multipart())
    if (
        mime == CONTENT_TYPE_FORM
        and method.upper() in FORM_BODY_METHODS
        and isinstance(payload, Mapping)
    ):
        return EncodedBody(content=stringify_form(payload))
    if mime == CONTENT_TYPE_MULTIPART and transform_multipart and isinstance(payload, Mapping):
        return EncodedBody(files=FormData.from_mapping(payload).to_multipart())
    if isinstance(payload, str | bytes):
        return EncodedBody(content=payload)
    return EncodedBody(json=payload)
