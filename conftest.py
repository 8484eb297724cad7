"""Configure test environment for hook subprocess tests.

End-to-end tests run ``hooks/stop-typecheck.py`` with the current
interpreter. The child process must be able to import ``typecheck_gate``
even when the package is not installed; PYTHONPATH is the standard
mechanism for this.
"""

from __future__ import annotations

import os
from pathlib import Path


def pytest_configure() -> None:
    """Add local-lib to PYTHONPATH for hook subprocesses.

    Complements pythonpath=["local-lib"] in pyproject.toml which only affects
    the pytest process itself, not spawned hooks.
    """
    lib_root = str(Path(__file__).resolve().parent / 'local-lib')
    os.environ['PYTHONPATH'] = os.pathsep.join(filter(None, [lib_root, os.environ.get('PYTHONPATH', '')]))
