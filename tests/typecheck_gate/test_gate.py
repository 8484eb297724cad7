"""Tests for the Stop-gate decision procedure with stub collaborators."""

from __future__ import annotations

import json
from typing import Any

import pytest
from typecheck_gate.commands import Command, CommandError, CommandResult, FallbackTypeChecker
from typecheck_gate.gate import evaluate, has_type_errors
from typecheck_gate.schemas.hooks import BLOCK_REASON_PREFIX, StopHookOutput

TS_ERRORS = (
    "src/index.ts(3,7): error TS2322: Type 'string' is not assignable to type 'number'.\n"
    "src/util.ts(10,1): error TS2304: Cannot find name 'foo'.\n"
)


class StubStatus:
    def __init__(self, output: str) -> None:
        self.output = output
        self.calls = 0

    def porcelain_status(self) -> str:
        self.calls += 1
        return self.output


class StubChecker:
    def __init__(self, output: str) -> None:
        self.output = output
        self.calls = 0

    def check(self) -> str:
        self.calls += 1
        return self.output


class TestCleanTree:
    """An empty porcelain status approves without type checking."""

    @pytest.mark.parametrize('status', ['', '   ', '\n', '\t\n  \n'])
    def test_approves_without_checking(self, status: str) -> None:
        checker = StubChecker(TS_ERRORS)

        result = evaluate(StubStatus(status), checker)

        assert result.decision == 'approve'
        assert result.reason is None
        assert checker.calls == 0


class TestDirtyTree:
    """A dirty tree runs the type checker once and applies the marker rule."""

    def test_no_output_approves(self) -> None:
        checker = StubChecker('')
        result = evaluate(StubStatus(' M src/index.ts\n'), checker)
        assert result.decision == 'approve'
        assert checker.calls == 1

    def test_whitespace_output_approves(self) -> None:
        result = evaluate(StubStatus('?? new.ts'), StubChecker('\n\n  '))
        assert result.decision == 'approve'

    def test_errors_block(self) -> None:
        result = evaluate(StubStatus(' M src/index.ts'), StubChecker(TS_ERRORS))
        assert result.decision == 'block'
        assert result.reason is not None
        assert result.reason.startswith(BLOCK_REASON_PREFIX)
        assert TS_ERRORS in result.reason

    def test_reason_is_prefix_blank_line_then_output_verbatim(self) -> None:
        result = evaluate(StubStatus(' M a.ts'), StubChecker(TS_ERRORS))
        assert result.reason == f'{BLOCK_REASON_PREFIX}\n\n{TS_ERRORS}'

    def test_unrelated_output_approves(self) -> None:
        result = evaluate(StubStatus(' M a.ts'), StubChecker('Compilation successful'))
        assert result.decision == 'approve'
        assert result.reason is None

    def test_marker_is_case_sensitive(self) -> None:
        result = evaluate(StubStatus(' M a.ts'), StubChecker('ERROR ts2322: nope'))
        assert result.decision == 'approve'

    def test_custom_marker(self) -> None:
        output = 'main.py:3: error: Incompatible types in assignment'
        result = evaluate(StubStatus(' M main.py'), StubChecker(output), error_marker=': error:')
        assert result.decision == 'block'
        assert output in (result.reason or '')

    def test_status_queried_once(self) -> None:
        status = StubStatus(' M a.ts')
        evaluate(status, StubChecker(''))
        assert status.calls == 1


class TestHasTypeErrors:
    def test_marker_present(self) -> None:
        assert has_type_errors('a.ts(1,1): error TS1005: ";" expected.')

    def test_empty(self) -> None:
        assert not has_type_errors('')

    def test_marker_absent(self) -> None:
        assert not has_type_errors('Found 0 errors.')


class TestOutputShape:
    """``reason`` is serialized iff the decision is ``block``."""

    def test_approve_json(self) -> None:
        payload = StopHookOutput.approve().model_dump_json(exclude_none=True)
        assert json.loads(payload) == {'decision': 'approve'}
        assert '\n' not in payload

    def test_block_json(self) -> None:
        payload = StopHookOutput.block(TS_ERRORS).model_dump_json(exclude_none=True)
        data = json.loads(payload)
        assert set(data) == {'decision', 'reason'}
        assert data['decision'] == 'block'
        assert data['reason'].endswith(TS_ERRORS)
        assert '\n' not in payload

    def test_block_without_reason_rejected(self) -> None:
        with pytest.raises(ValueError, match='requires a reason'):
            StopHookOutput(decision='block')

    def test_approve_with_reason_rejected(self) -> None:
        with pytest.raises(ValueError, match='must not carry a reason'):
            StopHookOutput(decision='approve', reason='why')

    def test_unknown_decision_rejected(self) -> None:
        with pytest.raises(ValueError):
            StopHookOutput(decision='deny')  # type: ignore[arg-type]


class TestFallbackDecisions:
    """Errors reported by a failing primary checker still block the stop."""

    @staticmethod
    def command(output: str = '', returncode: int = 0, *, error: CommandError | None = None) -> Command:
        def run() -> CommandResult:
            if error is not None:
                raise error
            return CommandResult(output=output, returncode=returncode)

        return run

    @pytest.mark.parametrize(
        'fallback_kwargs',
        [
            {'error': CommandError(['npx', 'tsc', '--noEmit'], 'No such file or directory')},
            {'output': 'npm error could not determine executable to run\n', 'returncode': 1},
        ],
        ids=['fallback-missing', 'fallback-unrelated-output'],
    )
    def test_primary_errors_block(self, fallback_kwargs: dict[str, Any]) -> None:
        primary = self.command('a.ts(1,1): error TS2322: bad\n', returncode=2)
        checker = FallbackTypeChecker(primary, self.command(**fallback_kwargs))

        result = evaluate(StubStatus(' M a.ts'), checker)

        assert result.decision == 'block'
        assert 'a.ts(1,1): error TS2322: bad\n' in (result.reason or '')
