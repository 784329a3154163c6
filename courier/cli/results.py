from __future__ import annotations

from typing import Any

from pydantic import Field

from courier.models.envelopes import CourierModel


class ErrorInfo(CourierModel):
    type: str
    message: str
    hint: str | None = None
    status_code: int | None = Field(None, alias="statusCode")
    details: Any | None = None


class CommandMeta(CourierModel):
    duration_ms: int = Field(..., alias="durationMs")
    method: str | None = None
    path: str | None = None


class CommandResult(CourierModel):
    ok: bool
    command: str
    data: Any | None = None
    meta: CommandMeta
    error: ErrorInfo | None = None
