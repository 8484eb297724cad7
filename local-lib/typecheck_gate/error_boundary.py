"""Process-level error boundary with type-based handler dispatch.

The Stop gate has two kinds of failure:

    Expected: the type checker fails to run or exits non-zero. Handled
    locally in ``FallbackTypeChecker``; the gate still emits a decision.

    Unexpected: stdin is not JSON, the directory is not a git repository,
    the settings are invalid. These reach the boundary at the entry point,
    are reported on stderr and end the process with a non-zero exit code.
    stdout stays empty, so the host never sees a half-written decision.

System exceptions (KeyboardInterrupt, SystemExit, GeneratorExit) always pass
through; ``isinstance(exc, Exception)`` is the positive check.

Usage::

    boundary = ErrorBoundary()

    @boundary.handler(pydantic.ValidationError)
    def handle_validation(exc: pydantic.ValidationError) -> None:
        print(f'invalid input: {exc}', file=sys.stderr)

    @boundary
    def main() -> None:
        ...
"""

from __future__ import annotations

__all__ = [
    'ErrorBoundary',
    'ErrorHandler',
]

import functools
import sys
import traceback
from collections.abc import Callable
from functools import singledispatch
from types import TracebackType
from typing import Any, Self, TypeAlias, TypeVar, cast

ErrorHandler: TypeAlias = Callable[[Exception], None]

_F = TypeVar('_F', bound=Callable[..., object])


class ErrorBoundary:
    """Catch application exceptions and delegate to registered handlers.

    Handlers are matched by MRO (``functools.singledispatch``), so registering
    for ``Exception`` acts as a catch-all. Usable as ``@boundary`` on a
    function or as ``with boundary:``.

    Args:
        handler: Catch-all handler (same as ``@boundary.handler(Exception)``).
            Defaults to printing the traceback to stderr.
        exit_code: Process exit code after handling. ``None`` suppresses the
            exception and continues.
    """

    def __init__(
        self,
        *,
        handler: ErrorHandler | None = None,
        exit_code: int | None = 1,
    ) -> None:
        self._dispatch = singledispatch(_default_handler)
        if handler is not None:
            self._dispatch.register(Exception, handler)
        self._exit_code = exit_code

    def handler(self, exc_type: type[Exception]) -> Callable[[Callable[..., None]], Callable[..., None]]:
        """Register a handler for a specific exception type."""
        return self._dispatch.register(exc_type)

    def __call__(self, func: _F) -> _F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with self:
                return func(*args, **kwargs)

        return cast(_F, wrapper)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        return self._handle(exc_value)

    def _handle(self, exc_value: BaseException | None) -> bool:
        """Dispatch, then exit or suppress.

        A handler that raises falls back to the default traceback report of
        the original exception.
        """
        if not isinstance(exc_value, Exception):
            return False  # No exception, or system exception: pass through

        try:
            self._dispatch(exc_value)
        except Exception:
            try:  # noqa: SIM105
                _default_handler(exc_value)
            except Exception:
                pass  # stderr itself is broken; nothing left to report to

        if self._exit_code is not None:
            sys.exit(self._exit_code)

        return True


def _default_handler(exc: Exception) -> None:
    """Print exception with traceback to stderr."""
    traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
