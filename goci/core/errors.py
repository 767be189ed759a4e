"""Error types shared by the pipeline, its steps and the CLI.

Sentinel conditions are exception classes and are matched by class anywhere
in a cause chain. `StepError` is matched by step name, so callers can ask
"did the go build step fail" without comparing diagnostic text.
"""

from __future__ import annotations

import signal


class GociError(Exception):
    """Base for all goci errors."""


class ValidationError(GociError):
    """Caller supplied unusable input (e.g. no project directory)."""


class UnsupportedOSError(GociError):
    """The host platform cannot run the pipeline."""


class Cancelled(GociError):
    """A run-wide cancellation stopped a step or a sink write."""


class DeadlineExceeded(GociError, TimeoutError):
    """A step was killed because it ran past its deadline."""


def _signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"signal {signum}"


class SignalError(GociError):
    """The run was aborted by a termination signal. Carries no step name."""

    def __init__(self, signum: int) -> None:
        super().__init__(signum)
        self.signum = signum

    def __str__(self) -> str:
        return f"{_signal_name(self.signum)}: Exiting: Received a signal"


class StepError(GociError):
    """A named pipeline step failed.

    Two step errors are the same error (see `error_is`) when their step names
    match; `message` and `cause` are not compared.
    """

    def __init__(self, step: str, message: str, cause: BaseException | None = None) -> None:
        super().__init__(step, message, cause)
        self.step = step
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return f'Step: "{self.step}": {self.message}: Cause: {self.cause}'

    def is_same(self, target: object) -> bool:
        return isinstance(target, StepError) and target.step == self.step


def unwrap(err: BaseException) -> BaseException | None:
    """Return the error *err* wraps, or None at the end of the chain."""

    cause = getattr(err, "cause", None)
    if isinstance(cause, BaseException):
        return cause
    return err.__cause__


def error_is(err: BaseException | None, target: object) -> bool:
    """Walk the cause chain of *err* looking for *target*.

    *target* is either an exception class (sentinel match by isinstance) or an
    exception instance (identity, or the level's own `is_same` hook).
    """

    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))

        if isinstance(target, type):
            if isinstance(err, target):
                return True
        elif err is target:
            return True
        else:
            is_same = getattr(err, "is_same", None)
            if is_same is not None and is_same(target):
                return True

        err = unwrap(err)

    return False
