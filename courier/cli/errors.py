from __future__ import annotations

from typing import Any

# Process exit codes.
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_AUTH = 3
EXIT_CANCELLED = 130


class CLIError(Exception):
    """A problem with the invocation itself; no request outcome is involved."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        exit_code: int = EXIT_USAGE,
        error_type: str = "usage_error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.exit_code = exit_code
        self.error_type = error_type
        self.details = details

    @classmethod
    def bad_value(cls, option: str, raw: str, expected: str) -> CLIError:
        return cls(
            f"{option} expects {expected}, got {raw!r}",
            details={"option": option, "value": raw},
        )

    def __str__(self) -> str:  # pragma: no cover
        return self.message
