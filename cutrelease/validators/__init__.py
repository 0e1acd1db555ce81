"""Validation modules for pre-release checks."""

from cutrelease.validators.base import (
    CheckContext,
    ValidationResult,
    ValidationSeverity,
    Validator,
    run_validators,
)
from cutrelease.validators.git import GIT_VALIDATORS, GitCleanValidator, GitHubRemoteValidator
from cutrelease.validators.preflight import (
    PREFLIGHT_VALIDATORS,
    AccessTokenValidator,
    ChangelogGeneratorValidator,
    GhInstalledValidator,
    GitInstalledValidator,
    run_preflight,
)
from cutrelease.validators.repo import RepoStateValidator

__all__ = [
    "CheckContext",
    "ValidationResult",
    "ValidationSeverity",
    "Validator",
    "run_validators",
    "PREFLIGHT_VALIDATORS",
    "AccessTokenValidator",
    "ChangelogGeneratorValidator",
    "GhInstalledValidator",
    "GitInstalledValidator",
    "run_preflight",
    "GIT_VALIDATORS",
    "GitCleanValidator",
    "GitHubRemoteValidator",
    "RepoStateValidator",
]
