"""
Host Version Gate Module

Parses the FXServer version string and gates startup on a minimum build.

Version strings look like ``FXServer-master SERVER v1.0.0.5894 win32``.
Builds that cannot be parsed are assumed to be custom builds and pass the
gate with a warning.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from fxpanel.domain.exceptions import ExitCode
from fxpanel.domain.models import UNPARSED_BUILD_SENTINEL, HostVersionInfo

from .outcome import StepResult


# 5894 = CREATE_VEHICLE_SERVER_SETTER
# 6508 = unhandledRejection became handleable
# 9655 = fixed ScanResourceRoot and latent events
MIN_FXSERVER_VERSION = 5894

_BUILD_RE = re.compile(r"v1\.0\.0\.(\d{4,5})\b")
_BRANCH_RE = re.compile(r"^FXServer-(\S+)")


@dataclass(frozen=True)
class ParsedFxsVersion:
    """Raw parse result of a version string."""

    valid: bool
    branch: Optional[str] = None
    build: Optional[int] = None
    platform: Optional[str] = None


def parse_fxserver_version(version: Optional[str]) -> ParsedFxsVersion:
    """Parse an FXServer version string. Never raises."""
    if not isinstance(version, str):
        return ParsedFxsVersion(valid=False)

    platform = None
    if "win32" in version:
        platform = "windows"
    elif "linux" in version:
        platform = "linux"

    build_match = _BUILD_RE.search(version)
    branch_match = _BRANCH_RE.match(version.strip())
    if not build_match or not branch_match:
        return ParsedFxsVersion(valid=False, platform=platform)

    return ParsedFxsVersion(
        valid=True,
        branch=branch_match.group(1),
        build=int(build_match.group(1)),
        platform=platform,
    )


def gate_host_version(
    raw_version: Optional[str],
    min_build: int = MIN_FXSERVER_VERSION,
) -> StepResult[HostVersionInfo]:
    """
    Check the host build against the minimum supported build.

    Args:
        raw_version: Value of the ``version`` convar (None if unset).
        min_build: Oldest compatible build.

    Returns:
        StepResult: Version facts; fatal when the build is too old.
    """
    parsed = parse_fxserver_version(raw_version)
    raw = raw_version or ""

    if not parsed.valid:
        info = HostVersionInfo(
            raw=raw,
            parsed=False,
            build_number=UNPARSED_BUILD_SENTINEL,
            platform=parsed.platform,
        )
        return StepResult.success(info, warnings=(
            "It looks like you are running a custom build of fxserver.",
            "And because of that, there is no guarantee that fxpanel will work properly.",
        ))

    info = HostVersionInfo(
        raw=raw,
        parsed=True,
        build_number=parsed.build,
        branch=parsed.branch,
        platform=parsed.platform,
    )

    if parsed.build < min_build:
        return StepResult.failure(
            ExitCode.HOST_VERSION_TOO_OLD,
            "This version of FXServer is too outdated and NOT compatible with fxpanel.",
            f"Please update to artifact/build {min_build} or newer!",
            f"Detected build: {parsed.build}",
        )

    if parsed.branch != "master":
        return StepResult.success(info, warnings=(
            f"You are running a custom branch of FXServer: {parsed.branch}",
        ))

    return StepResult.success(info)
