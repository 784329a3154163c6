from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.text import Text

from courier.models.envelopes import ResponseEnvelope

from .results import CommandResult


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str
    quiet: bool
    verbosity: int


def _render_data(stdout: Console, data: Any) -> None:
    if data is None:
        return
    if isinstance(data, dict | list):
        stdout.print_json(data=data)
        return
    stdout.print(Text(str(data)))


def _envelope_message(data: dict[str, Any]) -> str | None:
    # Success bodies are not validated; off-shape envelopes have no message.
    try:
        return ResponseEnvelope.from_body(data).message
    except ValidationError:
        return None


def render_result(
    result: CommandResult,
    *,
    settings: RenderSettings,
    error_already_shown: bool = False,
) -> None:
    stdout = Console(file=sys.stdout, force_terminal=False)
    stderr = Console(file=sys.stderr, force_terminal=False)

    if settings.output == "json":
        payload = result.model_dump(by_alias=True, mode="json")
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return

    if not result.ok:
        if result.error is not None and not error_already_shown:
            stderr.print(f"Error: {result.error.message}", markup=False)
        if result.error is not None and result.error.hint and not settings.quiet:
            stderr.print(f"Hint: {result.error.hint}", markup=False)
        return

    if result.command == "version" and isinstance(result.data, dict):
        stdout.print(Text(str(result.data.get("version", "")), style="bold"))
        return

    _render_data(stdout, result.data)
    if not settings.quiet and isinstance(result.data, dict):
        message = _envelope_message(result.data)
        if message:
            stderr.print(f"Message: {message}", markup=False)
    if settings.verbosity >= 1 and not settings.quiet:
        meta = result.meta
        stderr.print(f"{meta.method or ''} {meta.path or ''} in {meta.duration_ms}ms".strip())
