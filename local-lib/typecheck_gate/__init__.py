"""Stop hook that blocks session completion while the working tree has type errors."""

from __future__ import annotations

from typecheck_gate.commands import (
    CommandError,
    CommandResult,
    FallbackTypeChecker,
    GitStatusProvider,
    ShellCommand,
)
from typecheck_gate.config import GateConfig, load_config
from typecheck_gate.error_boundary import ErrorBoundary, ErrorHandler
from typecheck_gate.gate import evaluate

__all__ = [
    'CommandError',
    'CommandResult',
    'ErrorBoundary',
    'ErrorHandler',
    'FallbackTypeChecker',
    'GateConfig',
    'GitStatusProvider',
    'ShellCommand',
    'evaluate',
    'load_config',
]
