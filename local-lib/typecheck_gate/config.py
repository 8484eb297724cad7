"""Gate settings from the Claude settings hierarchy.

Reads the ``typecheckGate`` object from, in order:
  1. ``~/.claude/settings.json`` (user scope)
  2. ``<cwd>/.claude/settings.json`` (project shared)
  3. ``<cwd>/.claude/settings.local.json`` (project local)

Later files override keys set by earlier ones. Example::

    {
      "typecheckGate": {
        "primaryCommand": ["pnpm", "typecheck"],
        "timeoutSeconds": 120
      }
    }
"""

from __future__ import annotations

__all__ = [
    'SETTINGS_KEY',
    'GateConfig',
    'load_config',
    'settings_paths',
]

import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pydantic
import pydantic.alias_generators

from typecheck_gate.gate import DEFAULT_ERROR_MARKER
from typecheck_gate.schemas.hooks import StrictModel
from typecheck_gate.types import LogLevel
from typecheck_gate.utils import HOOK_NAME

SETTINGS_KEY = 'typecheckGate'


class GateConfig(StrictModel):
    """Type-check gate settings. Keys are camelCase in settings files."""

    model_config = pydantic.ConfigDict(
        alias_generator=pydantic.alias_generators.to_camel,
        populate_by_name=True,
    )

    primary_command: tuple[str, ...] = ('bun', 'typecheck')
    fallback_command: tuple[str, ...] = ('npx', 'tsc', '--noEmit')
    error_marker: str = DEFAULT_ERROR_MARKER
    timeout_seconds: float | None = None
    log_level: LogLevel = 'WARNING'

    @pydantic.field_validator('primary_command', 'fallback_command', mode='before')
    @classmethod
    def _list_to_tuple(cls, value: Any) -> Any:
        # JSON arrays arrive as lists; strict mode won't coerce them
        if isinstance(value, list):
            return tuple(value)
        return value

    @pydantic.field_validator('primary_command', 'fallback_command')
    @classmethod
    def _non_empty_command(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError('command must have at least one element')
        return value

    @pydantic.field_validator('error_marker')
    @classmethod
    def _non_empty_marker(cls, value: str) -> str:
        if not value:
            raise ValueError('error marker must not be empty')
        return value

    @pydantic.field_validator('timeout_seconds', mode='before')
    @classmethod
    def _int_timeout(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return float(value)
        return value

    @pydantic.field_validator('timeout_seconds')
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError('timeout must be positive')
        return value


def settings_paths(cwd: str | Path) -> Sequence[Path]:
    return [
        Path.home() / '.claude' / 'settings.json',
        Path(cwd) / '.claude' / 'settings.json',
        Path(cwd) / '.claude' / 'settings.local.json',
    ]


def load_config(cwd: str | Path) -> GateConfig:
    """Merge ``typecheckGate`` objects from the settings hierarchy.

    Raises:
        pydantic.ValidationError: If the merged settings are invalid
    """
    merged: dict[str, Any] = {}

    for path in settings_paths(cwd):
        if not path.is_file():
            continue
        try:
            data = json.loads(path.read_text())
        except (json.JSONDecodeError, OSError) as exc:
            print(f'{HOOK_NAME}: skipping {path}: {exc}', file=sys.stderr)
            continue

        section = data.get(SETTINGS_KEY) if isinstance(data, dict) else None
        if section is None:
            continue
        if not isinstance(section, dict):
            print(f'{HOOK_NAME}: skipping {path}: {SETTINGS_KEY} is not an object', file=sys.stderr)
            continue
        merged.update(section)

    return GateConfig.model_validate(merged)
