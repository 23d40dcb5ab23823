"""
Host Bridge Module

Access to the facts the game-server host hands to the panel: convars and
the metadata of the resource the panel is loaded as.

``HostBridge`` is the interface the resolvers depend on. ``MappingHost``
implements it over plain dictionaries, which is how the command-line entry
point and the tests feed convars in.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol


# Environment variables carrying convars when no host runtime is attached
CONVAR_ENV_PREFIX = "FXPANEL_CONVAR_"

DEFAULT_RESOURCE_NAME = "monitor"

_TRUE_VALUES = {"true", "1", "on"}


class HostBridge(Protocol):
    """Interface to the host engine's configuration facilities."""

    def get_convar(self, name: str, default: str) -> str:
        ...

    def current_resource_name(self) -> str:
        ...

    def get_resource_path(self, resource_name: str) -> Optional[str]:
        ...

    def get_resource_metadata(self, resource_name: str, key: str) -> Optional[str]:
        ...


@dataclass
class MappingHost:
    """
    Host bridge backed by dictionaries.

    Attributes:
        convars: Convar name to raw value.
        resource_name: Name of the resource the panel runs as.
        resource_path: Install path of that resource.
        resource_metadata: Manifest metadata of that resource (e.g. ``version``).
    """

    convars: dict[str, str] = field(default_factory=dict)
    resource_name: str = DEFAULT_RESOURCE_NAME
    resource_path: Optional[str] = None
    resource_metadata: dict[str, str] = field(default_factory=dict)

    def get_convar(self, name: str, default: str) -> str:
        return self.convars.get(name, default)

    def current_resource_name(self) -> str:
        return self.resource_name

    def get_resource_path(self, resource_name: str) -> Optional[str]:
        if resource_name != self.resource_name:
            return None
        return self.resource_path

    def get_resource_metadata(self, resource_name: str, key: str) -> Optional[str]:
        if resource_name != self.resource_name:
            return None
        return self.resource_metadata.get(key)

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        overrides: Optional[Mapping[str, str]] = None,
        resource_path: Optional[str] = None,
        tool_version: Optional[str] = None,
    ) -> MappingHost:
        """
        Build a host from ``FXPANEL_CONVAR_*`` variables plus explicit overrides.

        Args:
            environ: Environment to read (defaults to ``os.environ``).
            overrides: Convars that win over the environment.
            resource_path: Resource install path; defaults to the package parent.
            tool_version: Panel version reported through resource metadata.
        """
        environ = os.environ if environ is None else environ
        convars = {
            key[len(CONVAR_ENV_PREFIX):]: value
            for key, value in environ.items()
            if key.startswith(CONVAR_ENV_PREFIX)
        }
        if overrides:
            convars.update(overrides)

        if resource_path is None:
            resource_path = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        if tool_version is None:
            from fxpanel import __version__ as tool_version

        return cls(
            convars=convars,
            resource_path=resource_path,
            resource_metadata={"version": tool_version},
        )


def get_convar_string(host: HostBridge, name: str) -> Optional[str]:
    """
    Read a string convar.

    Returns:
        The trimmed value, or None when unset (the host reports unset
        convars as the literal string ``false``).
    """
    value = host.get_convar(name, "false").strip()
    return None if value == "false" else value


def get_convar_bool(host: HostBridge, name: str) -> bool:
    """Read a boolean convar (``true``, ``1`` or ``on``)."""
    return host.get_convar(name, "false").strip().lower() in _TRUE_VALUES
