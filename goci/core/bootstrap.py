from __future__ import annotations

import logging
import os


def configure_logging(*, verbose: bool = False) -> None:
    """Configure root logging for the CLI.

    If callers already configured logging handlers, we don't override them.
    Logs go to stderr so stdout only carries step success lines.
    """

    if logging.getLogger().handlers:
        return

    level = logging.DEBUG if verbose or os.environ.get("GOCI_DEBUG") else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
