"""
Runtime Module

Startup environment resolution:
- Host bridge to convars and resource metadata
- Platform, host version, paths, hosting mode and developer override
- Bootstrap orchestration into one frozen EnvironmentSnapshot

Usage:
    from fxpanel.runtime import EnvironmentResolver, MappingHost
    snapshot = EnvironmentResolver(MappingHost.from_environment()).bootstrap()

    # Later, anywhere in the process
    from fxpanel.runtime import get_environment
    env = get_environment()
"""

from .host import (
    HostBridge,
    MappingHost,
    get_convar_string,
    get_convar_bool,
)

from .outcome import StepResult

from .platform_probe import probe_platform

from .version_gate import (
    MIN_FXSERVER_VERSION,
    ParsedFxsVersion,
    parse_fxserver_version,
    gate_host_version,
)

from .paths import (
    clean_path,
    sanitize_profile_name,
    resolve_paths,
)

from .hosting import (
    DescriptorDeletionPolicy,
    HostingDecision,
    HostingModeDetector,
    load_zap_config,
)

from .dev_env import resolve_dev_environment

from .local_address import (
    LocalAddressRegistry,
    get_local_address_registry,
)

from .bootstrap import (
    EnvironmentResolver,
    ResolutionOutcome,
    get_environment,
    is_bootstrapped,
)


__all__ = [
    # Host bridge
    "HostBridge",
    "MappingHost",
    "get_convar_string",
    "get_convar_bool",

    # Steps
    "StepResult",
    "probe_platform",
    "MIN_FXSERVER_VERSION",
    "ParsedFxsVersion",
    "parse_fxserver_version",
    "gate_host_version",
    "clean_path",
    "sanitize_profile_name",
    "resolve_paths",
    "DescriptorDeletionPolicy",
    "HostingDecision",
    "HostingModeDetector",
    "load_zap_config",
    "resolve_dev_environment",

    # Local addresses
    "LocalAddressRegistry",
    "get_local_address_registry",

    # Bootstrap
    "EnvironmentResolver",
    "ResolutionOutcome",
    "get_environment",
    "is_bootstrapped",
]
