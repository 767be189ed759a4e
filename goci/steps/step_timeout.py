from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..core.errors import DeadlineExceeded, StepError
from ..core.model import DEFAULT_TIMEOUT_S
from .step_base import Step

if TYPE_CHECKING:
    from ..core.cancel import CancelScope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeBoundedStep(Step):
    """Run a command that is killed once *timeout* seconds have passed."""

    timeout: float | None = DEFAULT_TIMEOUT_S

    def __post_init__(self) -> None:
        super().__post_init__()
        # A zero deadline would fire immediately.
        if not self.timeout or self.timeout <= 0:
            object.__setattr__(self, "timeout", DEFAULT_TIMEOUT_S)

    def execute(self, scope: CancelScope | None = None) -> str:
        try:
            result = self._run(scope, timeout=self.timeout)
        except subprocess.TimeoutExpired as exc:
            logger.warning("Step %r killed after %.1fs deadline", self.name, self.timeout)
            deadline = DeadlineExceeded(f"deadline of {self.timeout:g}s exceeded")
            raise StepError(self.name, "failed time out", cause=deadline) from exc

        if result.exit_code != 0:
            err = self._exit_error(result)
            raise err from err.cause
        return self.message
