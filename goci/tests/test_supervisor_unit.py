from __future__ import annotations

import io
import signal
import sys
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from goci.core.cancel import CancelScope
from goci.core.errors import Cancelled, SignalError, StepError, error_is
from goci.core.supervisor import supervise
from goci.steps.step_base import Step


@dataclass
class FakeStep:
    name: str
    message: str
    error: Exception | None = None

    def execute(self, scope=None) -> str:
        if self.error is not None:
            raise self.error
        return self.message


@dataclass
class ObservedStep:
    """Wrap a real step, flag when it starts and record how it ended."""

    inner: Step
    started: threading.Event = field(default_factory=threading.Event)
    finished: threading.Event = field(default_factory=threading.Event)
    raised: BaseException | None = None

    @property
    def name(self) -> str:
        return self.inner.name

    def execute(self, scope=None) -> str:
        self.started.set()
        try:
            return self.inner.execute(scope)
        except BaseException as exc:
            self.raised = exc
            raise
        finally:
            self.finished.set()


def _signal_main_thread_when(event: threading.Event, signum: int) -> threading.Thread:
    def _fire() -> None:
        if event.wait(timeout=10):
            time.sleep(0.2)
            signal.pthread_kill(threading.main_thread().ident, signum)

    thread = threading.Thread(target=_fire, daemon=True)
    thread.start()
    return thread


def _sleeper(tmp_path: Path, name: str = "go test") -> ObservedStep:
    return ObservedStep(
        Step(
            name=name,
            executable=sys.executable,
            message="Go Test: SUCCESS",
            proj=str(tmp_path),
            args=("-c", "import time; time.sleep(30)"),
        )
    )


def test_supervise_completes_and_writes_all_lines() -> None:
    out = io.StringIO()

    supervise([FakeStep("a", "A: SUCCESS"), FakeStep("b", "B: SUCCESS")], out)

    assert out.getvalue() == "A: SUCCESS\nB: SUCCESS\n"


def test_supervise_reraises_step_error_verbatim() -> None:
    failure = StepError("b", "failed to execute: nope")
    out = io.StringIO()

    with pytest.raises(StepError) as info:
        supervise([FakeStep("a", "A"), FakeStep("b", "B", error=failure), FakeStep("c", "C")], out)

    assert info.value is failure
    assert out.getvalue() == "A\n"


def test_supervise_restores_signal_handlers() -> None:
    before = {s: signal.getsignal(s) for s in (signal.SIGINT, signal.SIGTERM)}

    supervise([FakeStep("a", "A")], io.StringIO())
    with pytest.raises(StepError):
        supervise([FakeStep("a", "A", error=StepError("a", "x"))], io.StringIO())

    assert {s: signal.getsignal(s) for s in before} == before


@pytest.mark.parametrize("signum", [signal.SIGINT, signal.SIGTERM])
def test_supervise_interrupt_kills_running_step(tmp_path: Path, signum: int) -> None:
    before = signal.getsignal(signum)
    sleeper = _sleeper(tmp_path)
    out = io.StringIO()
    _signal_main_thread_when(sleeper.started, signum)

    start = time.monotonic()
    with pytest.raises(SignalError) as info:
        supervise([FakeStep("go build", "Go Build: SUCCESS"), sleeper, FakeStep("go fmt", "Gofmt: SUCCESS")], out)

    assert info.value.signum == signum
    assert not error_is(info.value, StepError)
    assert signal.getsignal(signum) == before

    # The subprocess is killed rather than left to run its 30s.
    assert sleeper.finished.wait(timeout=10)
    assert time.monotonic() - start < 15
    assert isinstance(sleeper.raised, Cancelled)
    assert out.getvalue() == "Go Build: SUCCESS\n"


def test_supervise_interrupt_blocks_later_sink_writes(tmp_path: Path) -> None:
    scope = CancelScope()
    sleeper = _sleeper(tmp_path)
    out = io.StringIO()
    _signal_main_thread_when(sleeper.started, signal.SIGTERM)

    with pytest.raises(SignalError):
        supervise([sleeper, FakeStep("go fmt", "Gofmt: SUCCESS")], out, scope=scope)

    assert scope.cancelled
    assert sleeper.finished.wait(timeout=10)
    time.sleep(0.1)
    assert out.getvalue() == ""


def test_supervise_requires_main_thread() -> None:
    caught: list[BaseException] = []

    def _call() -> None:
        try:
            supervise([FakeStep("a", "A")], io.StringIO())
        except RuntimeError as exc:
            caught.append(exc)

    thread = threading.Thread(target=_call)
    thread.start()
    thread.join(timeout=10)

    assert len(caught) == 1
