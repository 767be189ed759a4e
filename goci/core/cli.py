from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import Iterable

from .bootstrap import configure_logging
from .config import PipelineConfig, load_config
from .errors import GociError, SignalError, UnsupportedOSError
from .pipeline import check_os, run
from ..steps.step_defs import steps as pipeline_steps

logger = logging.getLogger(__name__)


def _list_steps(proj: str, config: PipelineConfig) -> None:
    for number, step in enumerate(pipeline_steps(proj, config), start=1):
        print(f"  {number:>2}  {step.name:<10} - {' '.join(step.command())}")


def _apply_overrides(config: PipelineConfig, args: argparse.Namespace) -> PipelineConfig:
    changes = {}
    if args.push_timeout is not None:
        changes["push_timeout_s"] = args.push_timeout
    if args.remote:
        changes["git_remote"] = args.remote
    if args.branch:
        changes["git_branch"] = args.branch
    return dataclasses.replace(config, **changes)


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="goci", description="Build, test, format-check and push a Go project")
    parser.add_argument("-p", "--project", default="", help="Project directory")
    parser.add_argument("--list-steps", action="store_true", help="List pipeline steps and exit")
    parser.add_argument("--push-timeout", type=float, help="Seconds before git push is killed")
    parser.add_argument("--remote", help="Git remote to push to")
    parser.add_argument("--branch", help="Git branch to push")
    parser.add_argument("--verbose", action="store_true", help="Log each command's output")

    args = parser.parse_args(list(argv) if argv is not None else None)

    configure_logging(verbose=args.verbose)
    config = _apply_overrides(load_config(), args)

    if args.list_steps:
        _list_steps(args.project or ".", config)
        return 0

    try:
        check_os()
        run(args.project, sys.stdout, config=config)
    except UnsupportedOSError as exc:
        logger.error("An error: %s", exc)
        return 2
    except SignalError as exc:
        logger.error("An error: %s", exc)
        return 128 + exc.signum
    except (GociError, OSError) as exc:
        logger.error("An error: %s", exc)
        return 1

    return 0
