"""Pipeline settings.

Defaults can be overridden from the environment:
- GOCI_PUSH_TIMEOUT (seconds, publish step deadline)
- GOCI_GIT_REMOTE
- GOCI_GIT_BRANCH
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
    push_timeout_s: float = 10.0
    git_remote: str = "origin"
    git_branch: str = "master"


def _float_env(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not a number); using %s", key, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r (must be positive); using %s", key, raw, default)
        return default
    return value


def load_config(env: Mapping[str, str] | None = None) -> PipelineConfig:
    env = os.environ if env is None else env
    defaults = PipelineConfig()

    return PipelineConfig(
        push_timeout_s=_float_env(env, "GOCI_PUSH_TIMEOUT", defaults.push_timeout_s),
        git_remote=env.get("GOCI_GIT_REMOTE") or defaults.git_remote,
        git_branch=env.get("GOCI_GIT_BRANCH") or defaults.git_branch,
    )
