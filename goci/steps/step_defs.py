from __future__ import annotations

from ..core.config import PipelineConfig
from ..core.model import Executer
from .step_base import Step
from .step_format import FaultTolerantStep
from .step_timeout import TimeBoundedStep


def steps(proj: str, config: PipelineConfig) -> list[Executer]:
    """The Go pipeline: build, test, format check, publish."""

    return [
        Step(
            name="go build",
            executable="go",
            message="Go Build: SUCCESS",
            proj=proj,
            # Building more than one package discards the output binary.
            args=("build", ".", "errors"),
        ),
        Step(
            name="go test",
            executable="go",
            message="Go Test: SUCCESS",
            proj=proj,
            args=("test", "-v"),
        ),
        FaultTolerantStep(
            name="go fmt",
            executable="gofmt",
            message="Gofmt: SUCCESS",
            proj=proj,
            args=("-l", "."),
        ),
        TimeBoundedStep(
            name="git push",
            executable="git",
            message="Git Push: SUCCESS",
            proj=proj,
            args=("push", config.git_remote, config.git_branch),
            timeout=config.push_timeout_s,
        ),
    ]
