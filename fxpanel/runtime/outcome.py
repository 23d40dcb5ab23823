"""
Step Outcome Module

Result type returned by every environment resolution step. A step either
produces a value or a fatal condition, plus any warnings collected on the
way. Only the bootstrap orchestrator turns a fatal outcome into a process
exit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from fxpanel.domain.exceptions import ExitCode, FatalCondition

T = TypeVar("T")


@dataclass(frozen=True)
class StepResult(Generic[T]):
    """Outcome of a single resolution step."""

    value: Optional[T] = None
    fatal: Optional[FatalCondition] = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.fatal is None

    @classmethod
    def success(cls, value: T, warnings: tuple[str, ...] = ()) -> StepResult[T]:
        return cls(value=value, warnings=tuple(warnings))

    @classmethod
    def failure(
        cls,
        code: ExitCode,
        message: str,
        *details: str,
        warnings: tuple[str, ...] = (),
    ) -> StepResult[T]:
        return cls(
            fatal=FatalCondition(code=code, message=message, details=tuple(details)),
            warnings=tuple(warnings),
        )
