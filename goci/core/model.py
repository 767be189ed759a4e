from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .cancel import CancelScope


DEFAULT_TIMEOUT_S = 30.0


class Executer(Protocol):
    """What the runner needs from a pipeline step.

    `execute` returns the step's success message or raises (normally a
    StepError). The scope, when given, lets a run-wide cancel kill the step's
    subprocess.
    """

    @property
    def name(self) -> str: ...

    def execute(self, scope: CancelScope | None = None) -> str: ...
