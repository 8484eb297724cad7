"""Claude Code Stop hook input/output schemas.

See: https://code.claude.com/docs/en/hooks#stop
"""

from __future__ import annotations

from typing import Any, Self

import pydantic

from typecheck_gate.types import Decision

BLOCK_REASON_PREFIX = 'Type errors detected. Fix these before stopping.'


class StrictModel(pydantic.BaseModel):
    """Base model with strict validation."""

    model_config = pydantic.ConfigDict(
        extra='forbid',  # Reject unknown fields (fail-fast)
        strict=True,  # Strict type coercion
        frozen=True,  # Immutable after creation
    )


class _ExternalModel(pydantic.BaseModel):
    """Base for host payloads we don't control. Ignores unknown fields."""

    model_config = pydantic.ConfigDict(extra='ignore', frozen=True)


class StopHookInput(_ExternalModel):
    """Stop hook input schema.

    The gate only needs stdin to be valid JSON. ``cwd`` is used when it is a
    string; every other host field is carried but never checked.
    """

    session_id: Any = None
    transcript_path: Any = None
    cwd: str | None = None
    hook_event_name: Any = None
    stop_hook_active: Any = None
    permission_mode: Any = None

    @pydantic.field_validator('cwd', mode='before')
    @classmethod
    def _ignore_non_string_cwd(cls, value: Any) -> Any:
        return value if isinstance(value, str) and value else None

    @classmethod
    def from_json(cls, raw: str | bytes) -> StopHookInput:
        """Parse stdin. Invalid JSON raises; a non-object payload has no fields.

        Raises:
            pydantic.ValidationError: If ``raw`` is not valid JSON
        """
        data = _JSON_VALUE.validate_json(raw)
        if not isinstance(data, dict):
            return cls()
        return cls.model_validate(data)


_JSON_VALUE: pydantic.TypeAdapter[Any] = pydantic.TypeAdapter(Any)


class StopHookOutput(StrictModel):
    """Stop hook decision. Serialize with model_dump_json(exclude_none=True).

    ``reason`` is present iff ``decision == 'block'``.
    """

    decision: Decision
    reason: str | None = None

    @pydantic.model_validator(mode='after')
    def _reason_matches_decision(self) -> Self:
        if self.decision == 'block' and self.reason is None:
            raise ValueError('block decision requires a reason')
        if self.decision == 'approve' and self.reason is not None:
            raise ValueError('approve decision must not carry a reason')
        return self

    @classmethod
    def approve(cls) -> StopHookOutput:
        return cls(decision='approve')

    @classmethod
    def block(cls, diagnostics: str) -> StopHookOutput:
        """Block with the type checker's output appended verbatim."""
        return cls(decision='block', reason=f'{BLOCK_REASON_PREFIX}\n\n{diagnostics}')
