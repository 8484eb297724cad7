"""Stop-gate decision procedure.

Two branch points: is the working tree clean, and did the type checker
report compiler errors. Everything else (reading stdin, running commands,
printing the decision) lives at the edges.
"""

from __future__ import annotations

__all__ = [
    'DEFAULT_ERROR_MARKER',
    'evaluate',
    'has_type_errors',
]

import logging

from typecheck_gate.commands import StatusProvider, TypeChecker
from typecheck_gate.schemas.hooks import StopHookOutput

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MARKER = 'error TS'


def has_type_errors(diagnostics: str, error_marker: str = DEFAULT_ERROR_MARKER) -> bool:
    """True if the checker printed something and it contains the error marker."""
    return bool(diagnostics.strip()) and error_marker in diagnostics


def evaluate(
    status: StatusProvider,
    checker: TypeChecker,
    *,
    error_marker: str = DEFAULT_ERROR_MARKER,
) -> StopHookOutput:
    """Decide whether the session may stop.

    A clean working tree approves without running the type checker.
    """
    if not status.porcelain_status().strip():
        logger.info('Working tree clean; approving without type check')
        return StopHookOutput.approve()

    diagnostics = checker.check()

    if has_type_errors(diagnostics, error_marker):
        logger.info('Type check output contains %r; blocking stop', error_marker)
        return StopHookOutput.block(diagnostics)

    if diagnostics.strip():
        logger.debug('Type check output has no %r marker; approving', error_marker)
    else:
        logger.debug('Type check produced no output; approving')
    return StopHookOutput.approve()
