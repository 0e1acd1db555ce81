"""Cut releases of GitHub-hosted repositories."""

__version__ = "0.1.0"

from cutrelease.exceptions import (
    BuildError,
    ChangelogError,
    ConfigurationError,
    GitError,
    HostingError,
    PreflightError,
    ProtectionRestoreError,
    ReleaseError,
    ReleaseTimeoutError,
    SpecError,
    StateError,
    ValidationError,
)

__all__ = [
    "__version__",
    "ReleaseError",
    "ConfigurationError",
    "SpecError",
    "PreflightError",
    "ValidationError",
    "GitError",
    "StateError",
    "HostingError",
    "ProtectionRestoreError",
    "ChangelogError",
    "BuildError",
    "ReleaseTimeoutError",
]
