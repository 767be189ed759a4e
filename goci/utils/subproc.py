from __future__ import annotations

import os
import shlex
import signal
import subprocess
import time
from contextlib import nullcontext
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Sequence

from ..core.errors import Cancelled

if TYPE_CHECKING:
    from ..core.cancel import CancelScope


@dataclass(frozen=True)
class RunResult:
    command_str: str
    stdout: str
    stderr: str
    exit_code: int
    duration_s: float


def kill_process(proc: subprocess.Popen) -> None:
    """Kill *proc* and, on POSIX, everything in its process group."""

    if proc.poll() is not None:
        return

    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGKILL)
            return
        except (ProcessLookupError, PermissionError):
            pass

    try:
        proc.kill()
    except ProcessLookupError:
        pass


def run(
    args: Sequence[str],
    *,
    cwd: str,
    timeout: float | None = None,
    scope: CancelScope | None = None,
    capture_stdout: bool = False,
    env_overrides: Mapping[str, str] | None = None,
) -> RunResult:
    """Run *args* in *cwd* and wait for it.

    stderr is always captured; stdout only with *capture_stdout*.
    Raises subprocess.TimeoutExpired once the process has been killed at the
    deadline, and Cancelled when *scope* killed it. OSError from spawning
    (e.g. executable not found) propagates as-is.
    """

    command_str = " ".join(shlex.quote(p) for p in args)
    env = {**os.environ, **(env_overrides or {})}

    start = time.monotonic()
    proc = subprocess.Popen(
        list(args),
        cwd=cwd,
        text=True,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE if capture_stdout else subprocess.DEVNULL,
        stderr=subprocess.PIPE,
        env=env,
        # Own process group so a deadline or cancel also takes down children.
        start_new_session=os.name == "posix",
    )

    with scope.track(proc) if scope is not None else nullcontext(proc):
        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            kill_process(proc)
            proc.communicate()
            raise

    duration = time.monotonic() - start

    if scope is not None and scope.cancelled:
        raise Cancelled(f"{command_str}: killed by cancellation after {duration:.1f}s")

    return RunResult(
        command_str=command_str,
        stdout=stdout or "",
        stderr=stderr or "",
        exit_code=proc.returncode,
        duration_s=duration,
    )
