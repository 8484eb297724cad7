#!/usr/bin/env -S uv run --quiet --no-project --script
"""Stop hook: block the session from ending while TypeScript errors remain.

Skips the check entirely when ``git status --porcelain`` is empty. Otherwise
runs ``bun typecheck`` (falling back to ``npx tsc --noEmit``) and blocks when
the output contains ``error TS``. Commands, marker and timeout are
configurable through the ``typecheckGate`` settings key.

Install in ``~/.claude/settings.json``::

    { "hooks": { "Stop": [ { "hooks": [
        { "type": "command", "command": "/path/to/hooks/stop-typecheck.py" }
    ] } ] } }

See: https://code.claude.com/docs/en/hooks#stop
"""

# /// script
# requires-python = ">=3.13"
# dependencies = [
#   "gitpython>=3.1",
#   "pydantic>=2.6",
#   "typecheck_gate",
# ]
#
# [tool.uv.sources]
# typecheck_gate = { path = "../", editable = true }
# ///
from __future__ import annotations

from typecheck_gate.cli import main

if __name__ == '__main__':
    main()
