from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from goci.utils import subproc


_HELPER = Path(__file__).with_name("helper_process.py")
_REAL_POPEN = subprocess.Popen


# Keep helper switches and goci settings from leaking in from the shell.
@pytest.fixture(autouse=True)
def _clean_helper_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "GOCI_HELPER_FAIL",
        "GOCI_HELPER_SLEEP",
        "GOCI_HELPER_REPORT",
        "GOCI_DEBUG",
        "GOCI_PUSH_TIMEOUT",
        "GOCI_GIT_REMOTE",
        "GOCI_GIT_BRANCH",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fake_tools(monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    """Route every spawned command through helper_process.py.

    Returns the list of commands that were spawned, in order.
    """

    spawned: list[list[str]] = []

    def _popen(args, **kwargs):
        spawned.append(list(args))
        return _REAL_POPEN([sys.executable, str(_HELPER), *args], **kwargs)

    monkeypatch.setattr(subproc.subprocess, "Popen", _popen)
    return spawned

