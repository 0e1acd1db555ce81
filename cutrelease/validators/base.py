"""Abstract base class for validators.

Validators perform pre-release checks and report issues with
severity levels that determine whether a release can proceed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from cutrelease.config.models import ReleaseConfig


class ValidationSeverity(Enum):
    """Severity level for validation results.

    - ERROR: Blocks release (must be fixed)
    - WARNING: Shown but doesn't block (should be reviewed)
    - INFO: Informational only
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class ValidationResult:
    """Result of a validation check.

    Attributes:
        passed: Whether the validation passed
        message: Brief description of the result
        severity: How serious the issue is
        details: Extended explanation
        fix_command: Suggested command to fix the issue
    """

    passed: bool
    message: str
    severity: ValidationSeverity = ValidationSeverity.ERROR
    details: str | None = None
    fix_command: str | None = None

    @classmethod
    def success(cls, message: str = "Validation passed") -> "ValidationResult":
        return cls(passed=True, message=message, severity=ValidationSeverity.INFO)

    @classmethod
    def error(
        cls,
        message: str,
        details: str | None = None,
        fix_command: str | None = None,
    ) -> "ValidationResult":
        return cls(
            passed=False,
            message=message,
            severity=ValidationSeverity.ERROR,
            details=details,
            fix_command=fix_command,
        )

    @classmethod
    def warning(
        cls,
        message: str,
        details: str | None = None,
        fix_command: str | None = None,
    ) -> "ValidationResult":
        """Create a warning result; warnings do not block a release."""
        return cls(
            passed=True,
            message=message,
            severity=ValidationSeverity.WARNING,
            details=details,
            fix_command=fix_command,
        )


@dataclass(frozen=True)
class CheckContext:
    """What validators need to inspect the environment."""

    project_root: Path
    config: "ReleaseConfig"


class Validator(ABC):
    """Abstract base class for environment checks.

    Subclasses define name, description and category, and implement validate().
    """

    name: ClassVar[str]
    description: ClassVar[str]
    category: ClassVar[str]

    @abstractmethod
    def validate(self, context: CheckContext) -> ValidationResult:
        """Run the check and return its result."""

    def should_run(self, context: CheckContext) -> bool:
        """Override in subclasses to skip the check conditionally."""
        return True


def run_validators(
    validators: "list[type[Validator]] | tuple[type[Validator], ...]",
    context: CheckContext,
) -> list[tuple[Validator, ValidationResult]]:
    """Instantiate and run validators in order, skipping those that opt out."""
    results = []
    for validator_class in validators:
        validator = validator_class()
        if validator.should_run(context):
            results.append((validator, validator.validate(context)))
    return results
