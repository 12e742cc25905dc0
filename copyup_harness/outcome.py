import errno
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class InvariantViolation(Exception):
    """Raised when an identity or consistency invariant does not hold."""


class TriggerStatus(Enum):
    APPLIED = 'applied'
    UNSUPPORTED = 'unsupported'
    DENIED = 'denied'
    FAILED = 'failed'


class Status(Enum):
    PASSED = 'PASS'
    SKIPPED = 'SKIP'
    FAILED = 'FAIL'


@dataclass(frozen=True)
class ScenarioOutcome:
    name: str
    status: Status
    reason: str = ''

    @classmethod
    def passed(cls, name: str) -> 'ScenarioOutcome':
        return cls(name, Status.PASSED)

    @classmethod
    def skipped(cls, name: str, reason: str) -> 'ScenarioOutcome':
        return cls(name, Status.SKIPPED, reason)

    @classmethod
    def failed(cls, name: str, reason: str) -> 'ScenarioOutcome':
        return cls(name, Status.FAILED, reason)

    def __str__(self):
        if self.status is Status.SKIPPED:
            return f"{self.status.value} {self.name} ({self.reason})"
        return f"{self.status.value} {self.name}"


def errno_name(code: Optional[int]) -> str:
    if code is None:
        return 'unknown error'
    return f"{errno.errorcode.get(code, str(code))}: {os.strerror(code)}"


@dataclass(frozen=True)
class TriggerResult:
    """
    Tagged result of a single mutating syscall variant.

    Attributes:
        label (str): Name of the syscall variant, e.g. ``ftruncate``.
        status (TriggerStatus): What happened.
        error (int | None): The errno for anything but ``APPLIED``.
    """
    label: str
    status: TriggerStatus
    error: Optional[int] = None

    @property
    def applied(self) -> bool:
        return self.status is TriggerStatus.APPLIED

    def describe(self) -> str:
        if self.applied:
            return f"{self.label} applied"
        return f"{self.label} {self.status.value} ({errno_name(self.error)})"

    def to_outcome(self, scenario: str) -> ScenarioOutcome:
        """Map a non-applied result to the scenario's terminal outcome."""
        if self.status is TriggerStatus.FAILED:
            return ScenarioOutcome.failed(scenario, f"{self.label} failed: {errno_name(self.error)}")
        if self.applied:
            raise ValueError(f"{self.label} was applied, it has no terminal outcome")
        return ScenarioOutcome.skipped(scenario, self.describe())
