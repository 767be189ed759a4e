from __future__ import annotations

import logging
import sys
from typing import TextIO

from .config import PipelineConfig, load_config
from .errors import UnsupportedOSError, ValidationError
from .supervisor import supervise
from ..steps.step_defs import steps as pipeline_steps

logger = logging.getLogger(__name__)


def check_os(platform: str | None = None) -> None:
    platform = sys.platform if platform is None else platform
    if platform.startswith("win"):
        raise UnsupportedOSError("This OS is not supported")


def run(proj: str | None, out: TextIO, *, config: PipelineConfig | None = None) -> None:
    """Run the Go pipeline against *proj*, one success line per step on *out*."""

    if not proj:
        raise ValidationError("The project directory is required")

    config = config if config is not None else load_config()
    logger.debug("Running pipeline in %s with %s", proj, config)

    supervise(pipeline_steps(proj, config), out)
