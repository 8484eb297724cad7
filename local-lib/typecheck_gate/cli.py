"""Stop hook entry point: type-check a dirty working tree before the session ends.

Reads the Stop event from stdin, prints one JSON decision line to stdout:

    {"decision":"approve"}
    {"decision":"block","reason":"Type errors detected. ..."}

Exit code is 0 for both decisions; the host reads the payload. Unexpected
failures (input that isn't a JSON object, not a git repository, invalid
settings) go through the error boundary: stderr report, exit 1.

Hook docs: https://code.claude.com/docs/en/hooks#stop
"""

from __future__ import annotations

__all__ = [
    'build_gate',
    'configure_logging',
    'emit',
    'main',
]

import logging
import sys
import traceback
from pathlib import Path

import pydantic

from typecheck_gate.commands import FallbackTypeChecker, GitStatusProvider, ShellCommand
from typecheck_gate.config import GateConfig, load_config
from typecheck_gate.error_boundary import ErrorBoundary
from typecheck_gate.gate import evaluate
from typecheck_gate.schemas.hooks import StopHookInput, StopHookOutput
from typecheck_gate.utils import HOOK_NAME

# --- Error boundary (process-level) ---

boundary = ErrorBoundary(exit_code=1)


@boundary.handler(pydantic.ValidationError)
def _handle_validation(exc: pydantic.ValidationError) -> None:
    print(f'{HOOK_NAME} hook: invalid input or settings:\n{exc}', file=sys.stderr)


@boundary.handler(Exception)
def _handle_error(exc: Exception) -> None:
    print(f'{HOOK_NAME} hook error: {exc!r}', file=sys.stderr)
    traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)


# --- Helpers ---


def configure_logging(level: str) -> None:
    """Send library logs to stderr; stdout carries only the decision."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(f'{HOOK_NAME}: %(levelname)s %(name)s: %(message)s'))
    root = logging.getLogger('typecheck_gate')
    root.handlers[:] = [handler]
    root.setLevel(level)
    root.propagate = False


def build_gate(config: GateConfig, cwd: Path) -> tuple[GitStatusProvider, FallbackTypeChecker]:
    status = GitStatusProvider(cwd)
    checker = FallbackTypeChecker(
        primary=ShellCommand(config.primary_command, cwd=cwd, timeout=config.timeout_seconds),
        fallback=ShellCommand(config.fallback_command, cwd=cwd, timeout=config.timeout_seconds),
    )
    return status, checker


def emit(output: StopHookOutput) -> None:
    """Print the decision as a single JSON line."""
    print(output.model_dump_json(exclude_none=True))


# --- Main ---


@boundary
def main() -> None:
    hook_data = StopHookInput.from_json(sys.stdin.read())
    cwd = Path(hook_data.cwd) if hook_data.cwd else Path.cwd()

    config = load_config(cwd)
    configure_logging(config.log_level)

    status, checker = build_gate(config, cwd)
    emit(evaluate(status, checker, error_marker=config.error_marker))


if __name__ == '__main__':
    main()
