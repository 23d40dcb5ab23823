"""
Bootstrap Module

Sequences the environment resolution steps into one immutable
``EnvironmentSnapshot``. This is the single place where a fatal startup
condition turns into a process exit.

Usage:
    from fxpanel.runtime import EnvironmentResolver, MappingHost
    snapshot = EnvironmentResolver(MappingHost.from_environment()).bootstrap()
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional, Union

from fxpanel.domain.exceptions import FatalCondition
from fxpanel.domain.models import EnvironmentSnapshot

from .dev_env import resolve_dev_environment
from .host import HostBridge, get_convar_string
from .hosting import DescriptorDeletionPolicy, HostingModeDetector
from .local_address import LocalAddressRegistry, get_local_address_registry
from .outcome import StepResult
from .paths import check_archive_temp_folder, resolve_host_root, resolve_paths, resolve_resource
from .platform_probe import probe_platform
from .version_gate import MIN_FXSERVER_VERSION, gate_host_version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of a full resolution run: a snapshot or the first fatal condition."""

    snapshot: Optional[EnvironmentSnapshot] = None
    fatal: Optional[FatalCondition] = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.fatal is None


class _Abort(Exception):
    """Internal signal: a step returned a fatal outcome."""

    def __init__(self, fatal: FatalCondition):
        super().__init__(fatal.message)
        self.fatal = fatal


class EnvironmentResolver:
    """
    Resolves the startup environment.

    Args:
        host: Convar and resource source.
        environ: Process environment; defaults to ``os.environ``.
        system_name: OS name override (``platform.system()`` when None).
        dev_env_file: Optional dotenv file with ``TXDEV_*`` values.
        deletion_policy: Descriptor deletion policy for managed hosting.
        address_registry: Local-address allow-list receiving the forced interface.
        min_build: Oldest compatible host build.
    """

    def __init__(
        self,
        host: HostBridge,
        environ: Optional[Mapping[str, str]] = None,
        system_name: Optional[str] = None,
        dev_env_file: Optional[Union[str, Path]] = None,
        deletion_policy: DescriptorDeletionPolicy = DescriptorDeletionPolicy.UNLESS_DEV,
        address_registry: Optional[LocalAddressRegistry] = None,
        min_build: int = MIN_FXSERVER_VERSION,
    ):
        self._host = host
        self._environ = dict(os.environ if environ is None else environ)
        self._system_name = system_name
        self._dev_env_file = dev_env_file
        self._deletion_policy = deletion_policy
        self._address_registry = address_registry or get_local_address_registry()
        self._min_build = min_build
        self._warnings: list[str] = []

    def _take(self, result: StepResult):
        self._warnings.extend(result.warnings)
        if not result.ok:
            raise _Abort(result.fatal)
        return result.value

    def resolve(self) -> ResolutionOutcome:
        """
        Run every resolution step in order, stopping at the first fatal one.

        Returns:
            ResolutionOutcome: Snapshot on success, fatal condition otherwise.
        """
        self._warnings = []
        try:
            snapshot = self._resolve_steps()
        except _Abort as abort:
            return ResolutionOutcome(fatal=abort.fatal, warnings=tuple(self._warnings))
        return ResolutionOutcome(snapshot=snapshot, warnings=tuple(self._warnings))

    def _resolve_steps(self) -> EnvironmentSnapshot:
        platform = self._take(probe_platform(self._system_name))

        version = self._take(gate_host_version(
            get_convar_string(self._host, "version"),
            min_build=self._min_build,
        ))
        if not version.parsed:
            logger.debug(f"Unparsed FXServer version string: {version.raw!r}")

        tool_version, resource_path = self._take(resolve_resource(self._host))

        host_root = self._take(resolve_host_root(self._host))
        self._take(check_archive_temp_folder(host_root, platform))

        paths = self._take(resolve_paths(self._host, host_root, platform, version.build_number))

        dev_env = self._take(resolve_dev_environment(self._environ, self._dev_env_file))

        detector = HostingModeDetector(self._host, self._environ, self._deletion_policy)
        decision = self._take(detector.detect(paths.data_root_path, platform, dev_env.enabled))

        if decision.forced_interface:
            self._address_registry.add(decision.forced_interface)

        if dev_env.verbose:
            logger.debug(
                f"Hosting: mode={decision.mode.name} "
                f"admin_port={decision.admin_port} "
                f"forced_interface={decision.forced_interface}"
            )

        return EnvironmentSnapshot(
            platform=platform,
            version=version,
            paths=paths,
            hosting_mode=decision.mode,
            dev_env=dev_env,
            admin_port=decision.admin_port,
            tool_version=tool_version,
            resource_path=resource_path,
            forced_interface=decision.forced_interface,
        )

    def bootstrap(self, exit_fn: Callable[[int], None] = sys.exit) -> EnvironmentSnapshot:
        """
        Resolve, publish and return the snapshot, or terminate the process.

        Args:
            exit_fn: Called with the exit code on a fatal condition.

        Returns:
            EnvironmentSnapshot: The published snapshot.
        """
        outcome = self.resolve()
        for warning in outcome.warnings:
            logger.warning(warning)

        if not outcome.ok:
            report_fatal(outcome.fatal)
            exit_fn(int(outcome.fatal.code))
            raise SystemExit(int(outcome.fatal.code))

        publish_environment(outcome.snapshot)
        return outcome.snapshot


def report_fatal(fatal: FatalCondition) -> None:
    """Log a fatal condition with its remediation lines."""
    logger.error(fatal.message)
    for line in fatal.details:
        logger.error(line)
    logger.error(f"Exiting with code {int(fatal.code)} ({fatal.code.name}).")


# Published snapshot, set exactly once
_environment: Optional[EnvironmentSnapshot] = None


def publish_environment(snapshot: EnvironmentSnapshot) -> None:
    """
    Publish the process-wide snapshot.

    Raises:
        RuntimeError: If a snapshot was already published.
    """
    global _environment
    if _environment is not None:
        raise RuntimeError("Environment snapshot already published")
    _environment = snapshot


def get_environment() -> EnvironmentSnapshot:
    """
    Get the published snapshot.

    Raises:
        RuntimeError: If bootstrap has not completed.
    """
    if _environment is None:
        raise RuntimeError("Environment not resolved yet, call bootstrap() first")
    return _environment


def is_bootstrapped() -> bool:
    """
    Check if the environment has been published.

    Returns:
        bool: True if bootstrap has completed.
    """
    return _environment is not None
