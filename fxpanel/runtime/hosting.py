"""
Hosting Mode Detection Module

Decides how the server is hosted. Detection order, first match wins:

1. A managed-hosting (ZAP) descriptor file exists in the data root.
2. The Pterodactyl marker is set on a non-Windows host.
3. Standard hosting, configured through convars.

The descriptor is validated with a pydantic schema; any violation is fatal.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, StrictInt, ValidationError, field_validator

from fxpanel.domain.exceptions import ExitCode
from fxpanel.domain.models import (
    HostingMode,
    ManagedPterodactylHosting,
    ManagedZapHosting,
    MasterAccount,
    PlatformFacts,
    StandardHosting,
    ZapConfig,
)

from .host import HostBridge, get_convar_string
from .outcome import StepResult

logger = logging.getLogger(__name__)


ZAP_CONFIG_FILENAME = "txAdminZapConfig.json"
PTERODACTYL_MARKER_VAR = "TXADMIN_ENABLE"
DEFAULT_ADMIN_PORT = "40120"

IPV4_RE = re.compile(r"[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}")
_PORT_RE = re.compile(r"[0-9]+")

DEPLOYER_DEFAULT_KEYS = (
    "license",
    "maxClients",
    "mysqlHost",
    "mysqlPort",
    "mysqlUser",
    "mysqlPassword",
    "mysqlDatabase",
)


class DescriptorDeletionPolicy(Enum):
    """When a successfully parsed descriptor file is removed."""

    UNLESS_DEV = "unless_dev"
    ALWAYS = "always"
    NEVER = "never"

    def should_delete(self, dev_enabled: bool) -> bool:
        if self is DescriptorDeletionPolicy.ALWAYS:
            return True
        if self is DescriptorDeletionPolicy.NEVER:
            return False
        return not dev_enabled


class CustomerSchema(BaseModel):
    """``customer`` record of the descriptor."""

    name: str = Field(min_length=3)
    password_hash: str

    @field_validator("password_hash")
    @classmethod
    def _bcrypt_shaped(cls, value: str) -> str:
        if not value.startswith("$2y$"):
            raise ValueError("customer.password_hash is not a bcrypt hash.")
        return value


class ZapConfigSchema(BaseModel):
    """Schema of the managed-hosting descriptor file."""

    interface: Optional[str] = None
    fxServerPort: Optional[StrictInt] = Field(default=None, ge=1, le=65535)
    txAdminPort: StrictInt = Field(ge=1, le=65535)
    loginPageLogo: Optional[str] = None
    defaults: dict[str, Any]
    customer: Optional[CustomerSchema] = None

    @field_validator("interface")
    @classmethod
    def _dotted_quad(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not IPV4_RE.fullmatch(value):
            raise ValueError("interface is not an IPv4 address.")
        return value

    def to_config(self) -> ZapConfig:
        deployer_defaults = {
            key: str(self.defaults[key])
            for key in DEPLOYER_DEFAULT_KEYS
            if self.defaults.get(key) is not None
        }
        master_account = None
        if self.customer is not None:
            master_account = MasterAccount(
                name=self.customer.name,
                password_hash=self.customer.password_hash,
            )
        return ZapConfig(
            admin_port_override=self.txAdminPort,
            interface_override=self.interface,
            fxserver_port_override=self.fxServerPort,
            login_logo_override=self.loginPageLogo,
            master_account=master_account,
            deployer_defaults=deployer_defaults,
        )


@dataclass(frozen=True)
class HostingDecision:
    """Selected hosting mode and the admin bind settings that go with it."""

    mode: HostingMode
    admin_port: int
    forced_interface: Optional[str] = None


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for issue in error.errors():
        location = ".".join(str(item) for item in issue.get("loc", ())) or "descriptor"
        parts.append(f"{location}: {issue.get('msg')}")
    return "; ".join(parts)


def load_zap_config(path: str) -> ZapConfig:
    """
    Read and validate a descriptor file.

    Raises:
        ValueError: If the file is not valid JSON or violates the schema.
        OSError: If the file cannot be read.
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise ValueError("descriptor root is not an object.")

    try:
        schema = ZapConfigSchema.model_validate(data)
    except ValidationError as e:
        raise ValueError(_describe_validation_error(e)) from e
    return schema.to_config()


class HostingModeDetector:
    """
    Single decision function over the hosting markers.

    Args:
        host: Convar source.
        environ: Process environment (for the Pterodactyl marker).
        deletion_policy: What to do with the descriptor after a good parse.
    """

    def __init__(
        self,
        host: HostBridge,
        environ: Mapping[str, str],
        deletion_policy: DescriptorDeletionPolicy = DescriptorDeletionPolicy.UNLESS_DEV,
    ):
        self._host = host
        self._environ = environ
        self._deletion_policy = deletion_policy

    def is_pterodactyl_marked(self, platform: PlatformFacts) -> bool:
        return not platform.is_windows and self._environ.get(PTERODACTYL_MARKER_VAR) == "1"

    def detect(
        self,
        data_root: str,
        platform: PlatformFacts,
        dev_enabled: bool,
    ) -> StepResult[HostingDecision]:
        zap_path = os.path.join(data_root, ZAP_CONFIG_FILENAME)
        if os.path.exists(zap_path):
            return self._detect_zap(zap_path, platform, dev_enabled)

        mode: HostingMode = StandardHosting()
        if self.is_pterodactyl_marked(platform):
            mode = ManagedPterodactylHosting()
        return self._read_bind_convars(mode)

    def _detect_zap(
        self,
        zap_path: str,
        platform: PlatformFacts,
        dev_enabled: bool,
    ) -> StepResult[HostingDecision]:
        logger.info("Loading ZAP-Hosting configuration file.")
        if self.is_pterodactyl_marked(platform):
            logger.debug("Pterodactyl marker ignored, descriptor file takes priority.")

        try:
            config = load_zap_config(zap_path)
            if self._deletion_policy.should_delete(dev_enabled):
                os.unlink(zap_path)
        except (OSError, ValueError) as e:
            return StepResult.failure(
                ExitCode.ZAP_CONFIG_INVALID,
                f"Failed to load with ZAP-Hosting configuration error: {e}",
            )

        return StepResult.success(HostingDecision(
            mode=ManagedZapHosting(config=config),
            admin_port=config.admin_port_override,
            forced_interface=config.interface_override,
        ))

    def _read_bind_convars(self, mode: HostingMode) -> StepResult[HostingDecision]:
        port_convar = self._host.get_convar("txAdminPort", DEFAULT_ADMIN_PORT).strip()
        if not _PORT_RE.fullmatch(port_convar):
            return StepResult.failure(
                ExitCode.ADMIN_PORT_INVALID,
                "txAdminPort is not valid.",
                f"Received: {port_convar!r}",
            )

        interface = get_convar_string(self._host, "txAdminInterface")
        if interface and not IPV4_RE.fullmatch(interface):
            return StepResult.failure(
                ExitCode.ADMIN_INTERFACE_INVALID,
                "txAdminInterface is not valid.",
                f"Received: {interface!r}",
            )

        return StepResult.success(HostingDecision(
            mode=mode,
            admin_port=int(port_convar),
            forced_interface=interface or None,
        ))
