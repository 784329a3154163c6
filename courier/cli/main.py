from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import courier
from courier import RequestClient

from .click_compat import RichCommand, RichGroup, click
from .context import CLIContext
from .errors import EXIT_FAILURE, EXIT_OK, CLIError
from .logging import configure_logging, restore_logging
from .results import CommandMeta, CommandResult
from .runner import CommandOutput, emit, run_command

_CONTENT_TYPES = {
    "json": "application/json",
    "form": "application/x-www-form-urlencoded",
    "multipart": "multipart/form-data",
}


@click.group(
    name="courier",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=RichGroup,
)
@click.option(
    "--output",
    type=click.Choice(["table", "json"]),
    default="table",
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option("--base-url", type=str, default=None, help="Override COURIER_BASE_URL.")
@click.option("--token", type=str, envvar="COURIER_TOKEN", default=None, help="Bearer token.")
@click.option(
    "--token-header",
    type=str,
    default="Authorization",
    show_default=True,
    help="Header carrying the bearer token.",
)
@click.option("--timeout", type=float, default=None, help="Per-request timeout in seconds.")
@click.option("--mock", is_flag=True, help="Strip the /mock routing segment from request keys.")
@click.option(
    "--trace",
    is_flag=True,
    help="Trace request/response/error events to stderr (query strings stripped).",
)
@click.version_option(version=courier.__version__, prog_name="courier")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
    base_url: str | None,
    token: str | None,
    token_header: str,
    timeout: float | None,
    mock: bool,
    trace: bool,
) -> None:
    if click_ctx.invoked_subcommand is None:
        # No args: show help; no network calls.
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(EXIT_OK)

    click_ctx.obj = CLIContext(
        output="json" if json_flag else output,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
        base_url=base_url,
        token=token,
        token_header=token_header,
        timeout=timeout,
        mock=mock,
        trace=trace,
    )

    previous_logging = configure_logging(verbosity=verbose, secrets=[token] if token else [])
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# =============================================================================
# Option parsing helpers
# =============================================================================


def _parse_pairs(values: tuple[str, ...], *, option: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for raw in values:
        if "=" not in raw:
            raise CLIError.bad_value(option, raw, "key=value")
        key, value = raw.split("=", 1)
        if not key:
            raise CLIError.bad_value(option, raw, "a non-empty key")
        pairs[key] = value
    return pairs


def _parse_headers(values: tuple[str, ...]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise CLIError.bad_value("--header", raw, "'Name: value'")
        headers[name.strip()] = value.strip()
    return headers


def _parse_body(data: str | None, fields: tuple[str, ...]) -> Any:
    if data is not None and fields:
        raise CLIError("Use either --data or --field, not both.")
    if fields:
        return _parse_pairs(fields, option="--field")
    if data is None:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise CLIError(
            f"--data is not valid JSON: {exc.msg}",
            hint="Quote the body, e.g. --data '{\"name\": \"John\"}'.",
        ) from exc


def _body_headers(headers: tuple[str, ...], encoding: str) -> dict[str, str]:
    parsed = _parse_headers(headers)
    if encoding != "json" and "content-type" not in {k.lower() for k in parsed}:
        parsed["Content-Type"] = _CONTENT_TYPES[encoding]
    return parsed


def _ctx(click_ctx: click.Context) -> CLIContext:
    obj = click_ctx.obj
    assert isinstance(obj, CLIContext)
    return obj


_header_option = click.option(
    "-H", "--header", "headers", multiple=True, help="Extra header as 'Name: value'."
)
_param_option = click.option(
    "-p", "--param", "params", multiple=True, help="Query parameter as key=value."
)
_body_options = [
    click.option("--data", type=str, default=None, help="JSON request body."),
    click.option("-f", "--field", "fields", multiple=True, help="Body field as key=value."),
    click.option(
        "--encoding",
        type=click.Choice(sorted(_CONTENT_TYPES)),
        default="json",
        show_default=True,
        help="Body encoding.",
    ),
]


def _with_body_options(fn: Any) -> Any:
    for option in reversed(_body_options):
        fn = option(fn)
    return fn


# =============================================================================
# Commands
# =============================================================================


@cli.command(name="version", cls=RichCommand)
@click.pass_context
def version_cmd(click_ctx: click.Context) -> None:
    """Show the installed courier version."""
    ctx = _ctx(click_ctx)
    emit(
        ctx,
        CommandResult(
            ok=True,
            command="version",
            data={"version": courier.__version__},
            meta=CommandMeta(duration_ms=0),
        ),
    )


@cli.command(name="get", cls=RichCommand)
@click.argument("path")
@_param_option
@_header_option
@click.option(
    "--download",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Fetch the body as a blob and write it to this file.",
)
@click.pass_context
def get_cmd(
    click_ctx: click.Context,
    path: str,
    params: tuple[str, ...],
    headers: tuple[str, ...],
    download: Path | None,
) -> None:
    """GET a path."""
    ctx = _ctx(click_ctx)

    async def fn(client: RequestClient) -> CommandOutput:
        query = _parse_pairs(params, option="--param")
        extra_headers = _parse_headers(headers)
        if download is None:
            data = await client.get(path, params=query or None, headers=extra_headers or None)
            return CommandOutput(data=data, method="GET", path=path)
        response = await client.get(
            path, params=query or None, headers=extra_headers or None, response_type="blob"
        )
        if not response.is_success:
            raise CLIError(
                f"Download failed with status code {response.status_code}; nothing written.",
                exit_code=EXIT_FAILURE,
                error_type="download_failed",
                details={"status": response.status_code},
            )
        download.write_bytes(response.content)
        return CommandOutput(
            data={
                "path": str(download),
                "bytes": len(response.content),
                "status": response.status_code,
            },
            method="GET",
            path=path,
        )

    run_command(ctx, command="get", fn=fn, method="GET", path=path)


def _write_command(name: str, method: str) -> click.Command:
    @click.argument("path")
    @_param_option
    @_header_option
    @_with_body_options
    @click.pass_context
    def _cmd(
        click_ctx: click.Context,
        path: str,
        params: tuple[str, ...],
        headers: tuple[str, ...],
        data: str | None,
        fields: tuple[str, ...],
        encoding: str,
    ) -> None:
        ctx = _ctx(click_ctx)

        async def fn(client: RequestClient) -> CommandOutput:
            query = _parse_pairs(params, option="--param")
            body = _parse_body(data, fields)
            request_headers = _body_headers(headers, encoding)
            call = client.post if method == "POST" else client.put
            result = await call(
                path, data=body, params=query or None, headers=request_headers or None
            )
            return CommandOutput(data=result, method=method, path=path)

        run_command(ctx, command=name, fn=fn, method=method, path=path)

    _cmd.__doc__ = f"{method} a body to a path."
    return cli.command(name=name, cls=RichCommand)(_cmd)


post_cmd = _write_command("post", "POST")
put_cmd = _write_command("put", "PUT")


@cli.command(name="delete", cls=RichCommand)
@click.argument("path")
@_param_option
@_header_option
@click.pass_context
def delete_cmd(
    click_ctx: click.Context,
    path: str,
    params: tuple[str, ...],
    headers: tuple[str, ...],
) -> None:
    """DELETE a path."""
    ctx = _ctx(click_ctx)

    async def fn(client: RequestClient) -> CommandOutput:
        query = _parse_pairs(params, option="--param")
        extra_headers = _parse_headers(headers)
        data = await client.delete(path, params=query or None, headers=extra_headers or None)
        return CommandOutput(data=data, method="DELETE", path=path)

    run_command(ctx, command="delete", fn=fn, method="DELETE", path=path)
