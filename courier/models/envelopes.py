"""
Backend envelope shapes.

Success bodies come either wrapped (`{"data": ..., "message": ...}`) or as the
bare resource. Error bodies are resolved once, by `parse_error_body`, into one
of three tagged shapes instead of probing fields at every call site.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, Literal, TypeAlias, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

T = TypeVar("T")


class CourierModel(BaseModel):
    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
    )


def _text_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


class ResponseEnvelope(CourierModel, Generic[T]):
    """Typed view over an enveloped success body."""

    data: T | None = None
    message: str | None = None
    success: bool | None = None
    code: int | None = None

    @classmethod
    def from_body(cls, body: Any) -> ResponseEnvelope[Any]:
        """
        Wrap any success body.

        Bare resources (no `data` key) become the envelope's `data`.
        """
        if isinstance(body, Mapping) and "data" in body:
            return cls.model_validate(dict(body))
        return cls(data=body)


# =============================================================================
# Error bodies
# =============================================================================


class EnvelopedError(CourierModel):
    """`{"errors": {"field": ["message", ...]}, "message"?: str}` (HTTP 422)."""

    kind: Literal["enveloped"] = "enveloped"
    errors: dict[str, list[str]]
    message: str | None = None
    error: str | None = None

    @field_validator("errors", mode="before")
    @classmethod
    def _normalize_errors(cls, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return value
        normalized: dict[str, list[str]] = {}
        for name, messages in value.items():
            if isinstance(messages, str):
                normalized[str(name)] = [messages]
            elif isinstance(messages, list | tuple):
                normalized[str(name)] = [str(m) for m in messages]
            else:
                normalized[str(name)] = [str(messages)]
        return normalized

    @field_validator("message", "error", mode="before")
    @classmethod
    def _message_text(cls, value: Any) -> str | None:
        return _text_or_none(value)

    def first_error(self) -> str | None:
        """First message of the first field, if any."""
        for messages in self.errors.values():
            return messages[0] if messages else None
        return None


class BareError(CourierModel):
    """`{"message": ...}` / `{"error": ...}`, or any other non-empty body."""

    kind: Literal["bare"] = "bare"
    message: str | None = None
    error: str | None = None

    @field_validator("message", "error", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str | None:
        return _text_or_none(value)


class NoBody(CourierModel):
    """The response carried no body (or no response was received)."""

    kind: Literal["none"] = "none"


ErrorBody: TypeAlias = EnvelopedError | BareError | NoBody


def parse_error_body(payload: Any) -> ErrorBody:
    """Resolve a raw error payload into its tagged shape."""
    if payload is None or payload == "" or payload == b"":
        return NoBody()
    if not isinstance(payload, Mapping):
        return BareError()
    if isinstance(payload.get("errors"), Mapping):
        return EnvelopedError.model_validate(
            {
                "errors": payload["errors"],
                "message": payload.get("message"),
                "error": payload.get("error"),
            }
        )
    return BareError.model_validate(
        {"message": payload.get("message"), "error": payload.get("error")}
    )
