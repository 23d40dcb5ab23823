"""
Environment Domain Model

Immutable records describing the resolved runtime environment. Everything in
this module is created once during bootstrap and shared read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union


# Build number assumed for host builds whose version string cannot be parsed
UNPARSED_BUILD_SENTINEL = 99999


class OsFamily(Enum):
    """Supported host operating systems."""

    WINDOWS = "windows"
    LINUX = "linux"


@dataclass(frozen=True)
class PlatformFacts:
    """Operating system facts read once at boot."""

    os_family: OsFamily
    is_windows: bool


@dataclass(frozen=True)
class HostVersionInfo:
    """
    Parsed host engine version.

    When ``parsed`` is False the build number is the sentinel, so gating
    still has a total order to compare against.
    """

    raw: str
    parsed: bool
    build_number: int = UNPARSED_BUILD_SENTINEL
    branch: str = ""
    platform: Optional[str] = None


@dataclass(frozen=True)
class ResolvedPaths:
    """Filesystem locations, forward-slash normalized and ASCII only."""

    host_root_path: str
    data_root_path: str
    profile_name: str
    profile_root_path: str


@dataclass(frozen=True)
class MasterAccount:
    """Master account provisioned by a managed-hosting descriptor."""

    name: str
    password_hash: str


@dataclass(frozen=True)
class ZapConfig:
    """Values forced by a managed-hosting provisioning descriptor."""

    admin_port_override: int
    interface_override: Optional[str] = None
    fxserver_port_override: Optional[int] = None
    login_logo_override: Optional[str] = None
    master_account: Optional[MasterAccount] = None
    deployer_defaults: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self):
        if not isinstance(self.deployer_defaults, MappingProxyType):
            object.__setattr__(
                self, "deployer_defaults", MappingProxyType(dict(self.deployer_defaults))
            )


@dataclass(frozen=True)
class StandardHosting:
    """Self-hosted server, configured through convars."""

    name = "standard"


@dataclass(frozen=True)
class ManagedZapHosting:
    """Server provisioned through a managed-hosting descriptor file."""

    config: ZapConfig
    name = "zap"


@dataclass(frozen=True)
class ManagedPterodactylHosting:
    """Server running inside a Pterodactyl panel container."""

    name = "pterodactyl"


HostingMode = Union[StandardHosting, ManagedZapHosting, ManagedPterodactylHosting]


@dataclass(frozen=True)
class DevDisabled:
    """No developer override is active."""

    enabled = False
    verbose: bool = False


@dataclass(frozen=True)
class DevEnabled:
    """Developer override with live-reload frontend."""

    source_path: str
    live_reload_url: str
    verbose: bool = False
    enabled = True


DevEnvironment = Union[DevDisabled, DevEnabled]


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """
    The resolved environment, published once at boot.

    Components receive this object explicitly and never re-validate it.
    """

    platform: PlatformFacts
    version: HostVersionInfo
    paths: ResolvedPaths
    hosting_mode: HostingMode
    dev_env: DevEnvironment
    admin_port: int
    tool_version: str
    resource_path: str
    forced_interface: Optional[str] = None

    @property
    def is_zap_hosting(self) -> bool:
        return isinstance(self.hosting_mode, ManagedZapHosting)

    @property
    def is_pterodactyl(self) -> bool:
        return isinstance(self.hosting_mode, ManagedPterodactylHosting)

    @property
    def _zap(self) -> Optional[ZapConfig]:
        if isinstance(self.hosting_mode, ManagedZapHosting):
            return self.hosting_mode.config
        return None

    @property
    def forced_fxserver_port(self) -> Optional[int]:
        return self._zap.fxserver_port_override if self._zap else None

    @property
    def login_logo(self) -> Optional[str]:
        return self._zap.login_logo_override if self._zap else None

    @property
    def default_master_account(self) -> Optional[MasterAccount]:
        return self._zap.master_account if self._zap else None

    @property
    def deployer_defaults(self) -> Optional[Mapping[str, str]]:
        return self._zap.deployer_defaults if self._zap else None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary (password hashes omitted)."""
        account = self.default_master_account
        return {
            "osType": self.platform.os_family.value,
            "isWindows": self.platform.is_windows,
            "fxServerVersion": self.version.build_number,
            "fxServerBranch": self.version.branch,
            "toolVersion": self.tool_version,
            "resourcePath": self.resource_path,
            "fxServerPath": self.paths.host_root_path,
            "dataPath": self.paths.data_root_path,
            "profile": self.paths.profile_name,
            "profilePath": self.paths.profile_root_path,
            "hostingMode": self.hosting_mode.name,
            "devMode": self.dev_env.enabled,
            "adminPort": self.admin_port,
            "forceInterface": self.forced_interface,
            "forceFXServerPort": self.forced_fxserver_port,
            "loginPageLogo": self.login_logo,
            "defaultMasterAccount": account.name if account else None,
            "deployerDefaults": dict(self.deployer_defaults) if self.deployer_defaults is not None else None,
        }
