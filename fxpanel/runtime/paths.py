"""
Path Resolution Module

Derives and validates every filesystem path the panel relies on: the
panel resource, the host root (``citizen_root``), the data root
(``txDataPath``) and the server profile folder.

All paths are normalized to forward slashes regardless of the host OS.
"""

from __future__ import annotations

import os
import re
from typing import Optional

from fxpanel.domain.exceptions import ExitCode
from fxpanel.domain.models import PlatformFacts, ResolvedPaths

from .host import HostBridge, get_convar_string
from .outcome import StepResult


DEFAULT_PROFILE = "default"
DEPLOY_BASE_SUFFIX = ".base"
DATA_FOLDER_NAME = "txData"

# Non-ASCII paths break locale-aware string formatting further down the stack
_NON_ASCII_RE = re.compile(r"[^\x00-\x7F]+")
_PROFILE_STRIP_RE = re.compile(r"[^a-z0-9._-]", re.IGNORECASE)
_WINRAR_TEMP_RE = re.compile(r"Temp[\\/]+Rar\$", re.IGNORECASE)


def clean_path(path: str) -> str:
    """Normalize a path and convert it to forward slashes."""
    return os.path.normpath(path).replace("\\", "/")


def join_path(*parts: str) -> str:
    return clean_path(os.path.join(*parts))


def has_non_ascii(path: str) -> bool:
    return bool(_NON_ASCII_RE.search(path))


def resolve_resource(host: HostBridge) -> StepResult[tuple[str, str]]:
    """
    Discover the panel resource version and install path.

    Returns:
        StepResult: ``(tool_version, resource_path)``.
    """
    resource_name = host.current_resource_name()

    tool_version = host.get_resource_metadata(resource_name, "version")
    if not isinstance(tool_version, str) or tool_version in ("", "null"):
        return StepResult.failure(
            ExitCode.TOOL_VERSION_INVALID,
            "fxpanel version not set or in the wrong format",
        )

    resource_path = host.get_resource_path(resource_name)
    if not isinstance(resource_path, str) or resource_path in ("", "null"):
        return StepResult.failure(
            ExitCode.RESOURCE_PATH_UNRESOLVED,
            "Could not resolve fxpanel resource path",
        )

    return StepResult.success((tool_version, clean_path(resource_path)))


def resolve_host_root(host: HostBridge) -> StepResult[str]:
    """Read the host install root from the ``citizen_root`` convar."""
    citizen_root = get_convar_string(host, "citizen_root")
    if not citizen_root:
        return StepResult.failure(
            ExitCode.ROOT_PATH_UNSET,
            "citizen_root convar not set",
        )
    return StepResult.success(clean_path(citizen_root))


def check_archive_temp_folder(host_root: str, platform: PlatformFacts) -> StepResult[str]:
    """Reject hosts started from inside WinRAR's temporary extraction folder."""
    if platform.is_windows and _WINRAR_TEMP_RE.search(host_root):
        return StepResult.failure(
            ExitCode.EXTRACTED_ARCHIVE_PATH,
            "It looks like you ran FXServer inside WinRAR without extracting it first.",
            "Please extract the server files to a proper folder before running it.",
        )
    return StepResult.success(host_root)


def resolve_data_root(host: HostBridge, host_root: str, platform: PlatformFacts) -> str:
    """Data root from ``txDataPath``, or the OS default next to the host root."""
    data_path_convar = get_convar_string(host, "txDataPath")
    if data_path_convar:
        return clean_path(data_path_convar)

    suffix = ".." if platform.is_windows else "../../../"
    return join_path(host_root, suffix, DATA_FOLDER_NAME)


def check_ascii_paths(host_root: str, data_root: str, build_number: int) -> StepResult[None]:
    """Fatal if either root path contains non-ASCII characters."""
    if not (has_non_ascii(host_root) or has_non_ascii(data_root)):
        return StepResult.success(None)

    return StepResult.failure(
        ExitCode.NON_ASCII_PATH,
        "Due to environmental restrictions, your paths CANNOT contain non-ASCII characters.",
        "Example of non-ASCII characters: çâýå, ρέθ, ñäé, ēļæ, глж, เซิร์, 警告.",
        "Please make sure FXServer is not in a path containing those characters.",
        f'If on windows, we suggest you moving the artifact to "C:/fivemserver/{build_number}/".',
        f"FXServer path: {host_root}",
        f"txData path: {data_root}",
    )


def sanitize_profile_name(raw_profile: Optional[str]) -> StepResult[str]:
    """
    Reduce a profile name to ``[a-z0-9._-]`` and validate it.

    Args:
        raw_profile: Value of the ``serverProfile`` convar.

    Returns:
        StepResult: The sanitized name; fatal for deploy bases and empty names.
    """
    if raw_profile is None:
        raw_profile = DEFAULT_PROFILE
    profile = _PROFILE_STRIP_RE.sub("", raw_profile).strip()

    if profile.endswith(DEPLOY_BASE_SUFFIX):
        return StepResult.failure(
            ExitCode.PROFILE_IS_DEPLOY_BASE,
            f"Looks like the folder named '{profile}' is actually a deployed base instead of a profile.",
        )
    if not profile:
        return StepResult.failure(
            ExitCode.PROFILE_NAME_INVALID,
            "Invalid server profile name. Are you using Google Translator on the instructions page? "
            "Make sure there are no additional spaces in your command.",
        )
    return StepResult.success(profile)


def resolve_paths(
    host: HostBridge,
    host_root: str,
    platform: PlatformFacts,
    build_number: int,
) -> StepResult[ResolvedPaths]:
    """
    Resolve data root and profile folder for an already validated host root.

    Returns:
        StepResult: All resolved paths.
    """
    data_root = resolve_data_root(host, host_root, platform)

    ascii_check = check_ascii_paths(host_root, data_root, build_number)
    if not ascii_check.ok:
        return StepResult(fatal=ascii_check.fatal)

    profile_result = sanitize_profile_name(host.get_convar("serverProfile", DEFAULT_PROFILE))
    if not profile_result.ok:
        return StepResult(fatal=profile_result.fatal)
    profile = profile_result.value

    return StepResult.success(ResolvedPaths(
        host_root_path=host_root,
        data_root_path=data_root,
        profile_name=profile,
        profile_root_path=join_path(data_root, profile),
    ))
