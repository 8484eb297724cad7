"""Pydantic schemas for the Stop type-check gate."""

from __future__ import annotations

from typecheck_gate.schemas.hooks import (
    BLOCK_REASON_PREFIX,
    StopHookInput,
    StopHookOutput,
    StrictModel,
)

__all__ = [
    'BLOCK_REASON_PREFIX',
    'StopHookInput',
    'StopHookOutput',
    'StrictModel',
]
