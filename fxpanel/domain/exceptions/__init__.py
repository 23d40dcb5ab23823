"""
Domain Exceptions Module

Contains the boot-fatal taxonomy:
- ExitCode: Process exit status for every unrecoverable startup condition
- FatalCondition: A fatal finding carried by a resolution step
- BootFatalError: Raised where a fatal condition must cross a call boundary
- LocaleLoadError: A phrase catalog could not be loaded
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes for boot-fatal conditions."""

    UNSUPPORTED_OS = 100
    HOST_VERSION_TOO_OLD = 102
    TOOL_VERSION_INVALID = 103
    RESOURCE_PATH_UNRESOLVED = 104
    ROOT_PATH_UNSET = 105
    NON_ASCII_PATH = 107
    DEV_ENV_INCOMPLETE = 108
    ZAP_CONFIG_INVALID = 109
    ADMIN_PORT_INVALID = 110
    ADMIN_INTERFACE_INVALID = 111
    EXTRACTED_ARCHIVE_PATH = 112
    PROFILE_IS_DEPLOY_BASE = 113
    PROFILE_NAME_INVALID = 114
    LOCALE_LOAD_FAILED = 120


@dataclass(frozen=True)
class FatalCondition:
    """
    An unrecoverable startup finding.

    ``message`` is the headline shown to the operator; ``details`` carries
    remediation hints and the offending values, one line each.
    """

    code: ExitCode
    message: str
    details: tuple[str, ...] = field(default_factory=tuple)

    def lines(self) -> list[str]:
        return [self.message, *self.details]


class BootFatalError(Exception):
    """Exception carrying a fatal condition out of a component."""

    def __init__(self, condition: FatalCondition):
        super().__init__(condition.message)
        self.condition = condition

    @property
    def exit_code(self) -> int:
        return int(self.condition.code)


class LocaleLoadError(Exception):
    """Raised when a phrase catalog cannot be resolved or parsed."""
    pass


__all__ = [
    "ExitCode",
    "FatalCondition",
    "BootFatalError",
    "LocaleLoadError",
]
