from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..core.errors import StepError
from ..utils import subproc
from ..utils.log_format import StepLogRecord, format_standard_log
from ..utils.subproc import RunResult

if TYPE_CHECKING:
    from ..core.cancel import CancelScope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """Run one external command; any non-zero exit fails the step."""

    name: str
    executable: str
    message: str
    proj: str
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    def command(self) -> list[str]:
        return [self.executable, *self.args]

    def _log(self, result: RunResult, *, outcome: str, captured_stdout: bool) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        record = StepLogRecord(
            step_name=self.name,
            command=result.command_str,
            outcome=outcome,
            duration_s=result.duration_s,
            exit_code=result.exit_code,
            stdout=result.stdout if captured_stdout else None,
            stderr=result.stderr,
        )
        logger.debug("%s", format_standard_log(record))

    def _run(
        self,
        scope: CancelScope | None,
        *,
        timeout: float | None = None,
        capture_stdout: bool = False,
    ) -> RunResult:
        try:
            result = subproc.run(
                self.command(),
                cwd=self.proj,
                timeout=timeout,
                scope=scope,
                capture_stdout=capture_stdout,
            )
        except OSError as exc:
            # Spawn failure: nothing ran, so there is no diagnostic output.
            raise StepError(self.name, "failed to execute: ", cause=exc) from exc

        self._log(
            result,
            outcome="success" if result.exit_code == 0 else "failure",
            captured_stdout=capture_stdout,
        )
        return result

    def _exit_error(self, result: RunResult) -> StepError:
        cause = subprocess.CalledProcessError(
            result.exit_code,
            self.command(),
            output=result.stdout,
            stderr=result.stderr,
        )
        return StepError(self.name, f"failed to execute: {result.stderr}", cause=cause)

    def execute(self, scope: CancelScope | None = None) -> str:
        result = self._run(scope)
        if result.exit_code != 0:
            err = self._exit_error(result)
            raise err from err.cause
        return self.message
