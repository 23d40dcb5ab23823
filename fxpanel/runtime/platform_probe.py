"""
Platform Probe Module

Reads the operating system family. Only Windows and Linux hosts are
supported.
"""

from __future__ import annotations

import platform
from typing import Optional

from fxpanel.domain.exceptions import ExitCode
from fxpanel.domain.models import OsFamily, PlatformFacts

from .outcome import StepResult


_OS_FAMILIES = {
    "Windows": OsFamily.WINDOWS,
    "Linux": OsFamily.LINUX,
}


def probe_platform(system_name: Optional[str] = None) -> StepResult[PlatformFacts]:
    """
    Detect the host operating system.

    Args:
        system_name: Value of ``platform.system()``; read live when None.

    Returns:
        StepResult: Platform facts, or fatal for an unsupported OS.
    """
    if system_name is None:
        system_name = platform.system()

    os_family = _OS_FAMILIES.get(system_name)
    if os_family is None:
        return StepResult.failure(
            ExitCode.UNSUPPORTED_OS,
            f"OS type not supported: {system_name}",
        )

    return StepResult.success(PlatformFacts(
        os_family=os_family,
        is_windows=os_family is OsFamily.WINDOWS,
    ))
