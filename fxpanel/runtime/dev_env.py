"""
Developer Environment Module

Resolves the developer override used when working on the panel itself:
panel sources are served from ``TXDEV_SRC_PATH`` and the web frontend is
proxied to a live-reload server at ``TXDEV_VITE_URL``.

Values come from ``TXDEV_*`` process environment variables, layered over an
optional dotenv file. Partial configuration is fatal, never downgraded.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values

from fxpanel.domain.exceptions import ExitCode
from fxpanel.domain.models import DevDisabled, DevEnabled, DevEnvironment

from .outcome import StepResult

logger = logging.getLogger(__name__)


DEV_ENV_PREFIX = "TXDEV_"
_TRUE_VALUES = {"true", "1", "on", "yes"}


def _is_true(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUE_VALUES


def read_dev_descriptor(
    environ: Mapping[str, str],
    env_file: Optional[Union[str, Path]] = None,
) -> dict[str, str]:
    """
    Collect ``TXDEV_*`` values; the process environment wins over the file.

    Args:
        environ: Process environment.
        env_file: Optional dotenv file with the same keys.

    Returns:
        dict: Key (without prefix) to value.
    """
    merged: dict[str, str] = {}
    if env_file is not None and Path(env_file).is_file():
        for key, value in dotenv_values(env_file).items():
            if key.startswith(DEV_ENV_PREFIX) and value is not None:
                merged[key] = value
    for key, value in environ.items():
        if key.startswith(DEV_ENV_PREFIX):
            merged[key] = value

    return {key[len(DEV_ENV_PREFIX):]: value.strip() for key, value in merged.items()}


def resolve_dev_environment(
    environ: Mapping[str, str],
    env_file: Optional[Union[str, Path]] = None,
) -> StepResult[DevEnvironment]:
    """
    Resolve the developer override.

    Returns:
        StepResult: ``DevDisabled``, ``DevEnabled``, or fatal when enabled
        without both the source path and the live-reload URL.
    """
    descriptor = read_dev_descriptor(environ, env_file)
    verbose = _is_true(descriptor.get("VERBOSE"))

    if not _is_true(descriptor.get("ENABLED")):
        return StepResult.success(DevDisabled(verbose=verbose))

    logger.info("Starting fxpanel in DEV mode.")
    source_path = descriptor.get("SRC_PATH") or ""
    live_reload_url = descriptor.get("VITE_URL") or ""
    if not source_path or not live_reload_url:
        missing = [
            name
            for name, value in (("TXDEV_SRC_PATH", source_path), ("TXDEV_VITE_URL", live_reload_url))
            if not value
        ]
        return StepResult.failure(
            ExitCode.DEV_ENV_INCOMPLETE,
            "Missing TXDEV_VITE_URL and/or TXDEV_SRC_PATH env variables.",
            f"Not set: {', '.join(missing)}",
        )

    return StepResult.success(DevEnabled(
        source_path=source_path,
        live_reload_url=live_reload_url,
        verbose=verbose,
    ))
