"""Run a pipeline in the background and race it against termination signals.

The caller blocks on a single queue that receives exactly one of: the run
finished, the run raised, or a signal arrived. Whichever lands first decides
the outcome. On a signal the cancel scope kills the in-flight subprocess and
blocks further sink writes before `SignalError` is raised.
"""

from __future__ import annotations

import logging
import queue
import signal
import threading
from typing import Any, Callable, Iterable, Sequence, TextIO

from .cancel import CancelScope
from .errors import SignalError
from .model import Executer
from .runner import run_steps

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)

_DONE = "done"
_ERROR = "error"
_SIGNAL = "signal"


def _install_handlers(signals: Sequence[int], handler: Callable[[int, Any], None]) -> dict[int, Any]:
    previous: dict[int, Any] = {}
    try:
        for signum in signals:
            previous[signum] = signal.signal(signum, handler)
    except BaseException:
        _restore_handlers(previous)
        raise
    return previous


def _restore_handlers(previous: dict[int, Any]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler if handler is not None else signal.SIG_DFL)


def supervise(
    steps: Iterable[Executer],
    out: TextIO,
    *,
    signals: Sequence[int] = DEFAULT_SIGNALS,
    scope: CancelScope | None = None,
) -> None:
    """Run *steps* and return once they complete, fail or a signal arrives.

    Raises the runner's exception unchanged on failure and `SignalError` on
    interruption. Must be called from the main thread (signal handlers can
    only be installed there).
    """

    if threading.current_thread() is not threading.main_thread():
        raise RuntimeError("supervise() must be called from the main thread")

    scope = scope if scope is not None else CancelScope()
    steps = list(steps)
    # SimpleQueue.put is reentrant, so the signal handler may use it.
    events: queue.SimpleQueue[tuple[str, Any]] = queue.SimpleQueue()

    def _on_signal(signum: int, _frame: Any) -> None:
        events.put((_SIGNAL, signum))

    def _worker() -> None:
        try:
            run_steps(steps, out, scope=scope)
        except BaseException as exc:
            events.put((_ERROR, exc))
            return
        events.put((_DONE, None))

    previous = _install_handlers(signals, _on_signal)
    try:
        threading.Thread(target=_worker, name="goci-pipeline", daemon=True).start()
        kind, payload = events.get()
        if kind == _SIGNAL:
            scope.cancel()
    finally:
        _restore_handlers(previous)

    if kind == _SIGNAL:
        err = SignalError(payload)
        logger.warning("Run interrupted (%s); in-flight step cancelled", err)
        raise err
    if kind == _ERROR:
        raise payload
