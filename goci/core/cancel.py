from __future__ import annotations

import subprocess
import threading
from contextlib import contextmanager
from typing import Iterator

from .errors import Cancelled
from ..utils.subproc import kill_process


class CancelScope:
    """Run-wide cancellation shared by the supervisor and the running steps.

    `cancel()` kills every tracked subprocess with the same mechanism a step
    deadline uses. The scope lock orders cancellation against process
    registration and sink writes: once `cancel()` returns, no tracked process
    survives and no guarded write can start.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._procs: set[subprocess.Popen] = set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            procs = list(self._procs)

        for proc in procs:
            kill_process(proc)

    @contextmanager
    def track(self, proc: subprocess.Popen) -> Iterator[subprocess.Popen]:
        with self._lock:
            cancelled = self._cancelled
            if not cancelled:
                self._procs.add(proc)

        if cancelled:
            kill_process(proc)

        try:
            yield proc
        finally:
            with self._lock:
                self._procs.discard(proc)

    @contextmanager
    def guard(self) -> Iterator[None]:
        with self._lock:
            if self._cancelled:
                raise Cancelled("run was cancelled")
            yield
