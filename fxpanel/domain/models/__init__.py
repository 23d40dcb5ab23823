"""
Domain Models Module

Contains the environment records shared across fxpanel.
"""

from .environment import (
    UNPARSED_BUILD_SENTINEL,
    OsFamily,
    PlatformFacts,
    HostVersionInfo,
    ResolvedPaths,
    MasterAccount,
    ZapConfig,
    StandardHosting,
    ManagedZapHosting,
    ManagedPterodactylHosting,
    HostingMode,
    DevDisabled,
    DevEnabled,
    DevEnvironment,
    EnvironmentSnapshot,
)

__all__ = [
    # Platform and version
    "UNPARSED_BUILD_SENTINEL",
    "OsFamily",
    "PlatformFacts",
    "HostVersionInfo",
    # Paths
    "ResolvedPaths",
    # Hosting
    "MasterAccount",
    "ZapConfig",
    "StandardHosting",
    "ManagedZapHosting",
    "ManagedPterodactylHosting",
    "HostingMode",
    # Developer override
    "DevDisabled",
    "DevEnabled",
    "DevEnvironment",
    # Snapshot
    "EnvironmentSnapshot",
]
