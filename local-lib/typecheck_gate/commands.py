"""External collaborators of the Stop gate: working-tree status and type checking.

The gate only sees two narrow capabilities:

- ``StatusProvider.porcelain_status()``: porcelain listing of pending changes
- ``TypeChecker.check()``: diagnostic text from the type checker

Concrete implementations run git through GitPython and the type-check
commands as argv lists (no shell string building), so tests can swap
either side for a stub.
"""

from __future__ import annotations

__all__ = [
    'Command',
    'CommandError',
    'CommandResult',
    'FallbackTypeChecker',
    'GitStatusProvider',
    'ShellCommand',
    'StatusProvider',
    'TypeChecker',
]

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import git

from typecheck_gate.utils import Timer, truncate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Combined stdout+stderr text and exit status of a finished command."""

    output: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandError(Exception):
    """A command could not be executed or did not finish in time.

    Carries any output produced before the failure.
    """

    def __init__(self, argv: Sequence[str], reason: str, output: str = '') -> None:
        self.argv = tuple(argv)
        self.reason = reason
        self.output = output
        super().__init__(f'{" ".join(self.argv)}: {reason}')


class Command(Protocol):
    def __call__(self) -> CommandResult: ...


class StatusProvider(Protocol):
    def porcelain_status(self) -> str: ...


class TypeChecker(Protocol):
    def check(self) -> str: ...


# --- Concrete collaborators ---


class ShellCommand:
    """Run an argv list with stderr merged into stdout.

    Non-zero exit is reported through ``CommandResult.returncode``, never
    raised. Launch failures and timeouts raise ``CommandError``.
    """

    def __init__(
        self,
        argv: Sequence[str],
        *,
        cwd: str | Path | None = None,
        timeout: float | None = None,
    ) -> None:
        if not argv:
            raise ValueError('command must not be empty')
        self.argv = tuple(argv)
        self.cwd = cwd
        self.timeout = timeout

    def __repr__(self) -> str:
        return f'ShellCommand({list(self.argv)!r}, cwd={self.cwd!r}, timeout={self.timeout!r})'

    def __call__(self) -> CommandResult:
        try:
            result = subprocess.run(
                self.argv,
                cwd=self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                errors='replace',
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandError(self.argv, f'timed out after {self.timeout}s', _decode(e.output)) from e
        except OSError as e:
            raise CommandError(self.argv, str(e)) from e

        return CommandResult(output=result.stdout or '', returncode=result.returncode)


def _decode(output: str | bytes | None) -> str:
    # TimeoutExpired.output is bytes even when the run was in text mode
    if output is None:
        return ''
    if isinstance(output, bytes):
        return output.decode(errors='replace')
    return output


class GitStatusProvider:
    """Porcelain ``git status`` of the repository containing ``path``.

    Errors (not a repository, git failure) propagate to the caller.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def porcelain_status(self) -> str:
        repo = git.Repo(self.path, search_parent_directories=True)
        try:
            status = repo.git.status('--porcelain')
        finally:
            repo.close()
        logger.debug('git status --porcelain in %s: %d line(s)', self.path, len(status.splitlines()))
        return status


class FallbackTypeChecker:
    """Run ``primary``; on launch failure or non-zero exit run ``fallback`` once.

    On the fallback path the primary's output (or the partial output of a
    primary that could not run) comes first, followed by the fallback's.
    Diagnostics from a primary that exited non-zero survive a fallback that
    is missing or prints something unrelated. When neither printed anything,
    a type checker that never ran looks the same as a clean one.
    """

    def __init__(self, primary: Command, fallback: Command) -> None:
        self.primary = primary
        self.fallback = fallback

    def check(self) -> str:
        timer = Timer()
        try:
            result = self.primary()
        except CommandError as e:
            logger.info('Primary type check failed to run (%s); trying fallback', e)
            primary_output = e.output
        else:
            if result.ok:
                logger.debug('Primary type check passed in %d ms', timer.elapsed_ms())
                return result.output
            logger.info(
                'Primary type check exited %d (%s); trying fallback',
                result.returncode,
                truncate(result.output),
            )
            primary_output = result.output

        try:
            result = self.fallback()
        except CommandError as e:
            if not (primary_output + e.output).strip():
                logger.warning('Fallback type check failed to run (%s); no diagnostics captured', e)
            else:
                logger.warning('Fallback type check failed to run (%s)', e)
            return primary_output + e.output

        logger.debug('Fallback type check exited %d in %d ms', result.returncode, timer.elapsed_ms())
        return primary_output + result.output
