from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..core.errors import StepError
from .step_base import Step

if TYPE_CHECKING:
    from ..core.cancel import CancelScope


@dataclass(frozen=True)
class FaultTolerantStep(Step):
    """Run a check tool that reports findings on stdout.

    Tools like `gofmt -l` exit 0 whether or not they found anything, so the
    report decides: a non-empty stdout fails the step with the report as the
    message and no cause. A non-zero exit is still an execution failure.
    """

    def execute(self, scope: CancelScope | None = None) -> str:
        result = self._run(scope, capture_stdout=True)
        if result.exit_code != 0:
            err = self._exit_error(result)
            raise err from err.cause

        report = result.stdout.strip()
        if report:
            raise StepError(self.name, f"invalid format: {report}")

        return self.message
