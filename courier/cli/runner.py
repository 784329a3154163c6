from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from courier import CourierError, RequestClient

from .click_compat import click
from .context import CLIContext, error_info_for_exception, exit_code_for_exception
from .errors import EXIT_OK
from .render import RenderSettings, render_result
from .results import CommandMeta, CommandResult


@dataclass(frozen=True, slots=True)
class CommandOutput:
    data: Any | None = None
    method: str | None = None
    path: str | None = None
    exit_code: int = EXIT_OK


CommandFn = Callable[[RequestClient], Awaitable[CommandOutput]]


async def _run_with_client(ctx: CLIContext, fn: CommandFn) -> CommandOutput:
    async with ctx.build_client() as client:
        return await fn(client)


def _settings(ctx: CLIContext) -> RenderSettings:
    return RenderSettings(output=ctx.output, quiet=ctx.quiet, verbosity=ctx.verbosity)


def emit(ctx: CLIContext, result: CommandResult, *, error_already_shown: bool = False) -> None:
    render_result(result, settings=_settings(ctx), error_already_shown=error_already_shown)


def run_command(
    ctx: CLIContext,
    *,
    command: str,
    fn: CommandFn,
    method: str | None = None,
    path: str | None = None,
) -> None:
    started = time.time()

    def _meta() -> CommandMeta:
        duration_ms = int(max(0.0, (time.time() - started) * 1000))
        return CommandMeta(duration_ms=duration_ms, method=method, path=path)

    try:
        out = asyncio.run(_run_with_client(ctx, fn))
        emit(ctx, CommandResult(ok=True, command=command, data=out.data, meta=_meta()))
        raise click.exceptions.Exit(out.exit_code)
    except click.exceptions.Exit:
        raise
    except Exception as exc:
        result = CommandResult(
            ok=False,
            command=command,
            data=None,
            meta=_meta(),
            error=error_info_for_exception(exc),
        )
        # The client's notifier already printed the notice for failed calls.
        shown = isinstance(exc, CourierError) and ctx.notifier is not None and bool(
            ctx.notifier.messages
        )
        emit(ctx, result, error_already_shown=shown)
        raise click.exceptions.Exit(exit_code_for_exception(exc)) from exc
