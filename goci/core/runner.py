from __future__ import annotations

import logging
import time
from typing import Iterable, TextIO

from .cancel import CancelScope
from .model import Executer

logger = logging.getLogger(__name__)


def _write_line(out: TextIO, message: str, scope: CancelScope | None) -> None:
    if scope is None:
        out.write(f"{message}\n")
        return
    with scope.guard():
        out.write(f"{message}\n")


def run_steps(steps: Iterable[Executer], out: TextIO, *, scope: CancelScope | None = None) -> None:
    """Execute *steps* in order, writing each success message to *out*.

    The first exception from a step or from writing to *out* stops the run
    and propagates unchanged.
    """

    for number, step in enumerate(steps, start=1):
        logger.info("[%d] %s: running", number, step.name)
        start = time.monotonic()

        try:
            message = step.execute(scope)
        except Exception:
            logger.info("Stopped on failure in step %d: %s", number, step.name)
            raise

        logger.info("[%d] %s: OK (%.1fs)", number, step.name, time.monotonic() - start)
        _write_line(out, message, scope)
