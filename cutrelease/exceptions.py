"""Exception hierarchy for cutrelease.

Exit codes surfaced to the invoking shell:
- 1: General error
- 2: Configuration error
- 3: Spec error (unknown release mode)
- 4: Preflight error
- 5: Git error (including an unreleasable repository state)
- 6: Hosting service error
- 7: Changelog error
- 8: Build/OS error
- 9: Timeout
"""


class ReleaseError(Exception):
    """Base exception for all release errors.

    Each subclass defines an exit_code for CLI error reporting.
    """

    exit_code: int = 1

    def __init__(
        self,
        message: str,
        details: str | None = None,
        fix_hint: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Brief error message
            details: Detailed explanation of what went wrong
            fix_hint: Suggested command or action to fix the issue
        """
        super().__init__(message)
        self.message = message
        self.details = details
        self.fix_hint = fix_hint

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            parts.append(f"\nDetails: {self.details}")
        if self.fix_hint:
            parts.append(f"\nFix: {self.fix_hint}")
        return "".join(parts)


class ConfigurationError(ReleaseError):
    """Configuration errors.

    Raised when:
    - Config file has invalid syntax (YAML/TOML)
    - Config values fail validation
    - No GitHub access token is available
    """

    exit_code = 2


class SpecError(ReleaseError):
    """Release specification errors, such as an unknown release mode."""

    exit_code = 3


class PreflightError(ReleaseError):
    """Required tooling is missing or unusable."""

    exit_code = 4


class ValidationError(ReleaseError):
    """Invalid input values, such as a malformed semantic version."""

    exit_code = 1


class GitError(ReleaseError):
    """Git operation failures.

    Raised when:
    - Git commands fail
    - Branch operations fail
    - Tag creation fails
    - Push or pull operations fail
    """

    exit_code = 5


class StateError(GitError):
    """The local repository is not in a releasable state.

    Raised when:
    - The current branch is not the default branch
    - The working copy has uncommitted changes
    """


class HostingError(ReleaseError):
    """Hosting service (GitHub) failures.

    Raised when:
    - An API call fails (network, authentication, permission)
    - A response has an unexpected shape
    - A draft release or pull request expected to exist is missing
    """

    exit_code = 6


class ProtectionRestoreError(HostingError):
    """Branch protection could not be re-enabled.

    Carries the error that was propagating when restoration was attempted,
    so that neither failure is hidden.
    """

    def __init__(
        self,
        message: str,
        details: str | None = None,
        fix_hint: str | None = None,
        original: BaseException | None = None,
    ) -> None:
        super().__init__(message, details=details, fix_hint=fix_hint)
        self.original = original


class ChangelogError(ReleaseError):
    """Changelog generation failures."""

    exit_code = 7


class BuildError(ReleaseError):
    """Build subsystem or OS failures.

    Raised when:
    - A build command fails
    - Expected build outputs are missing
    - An artifact file cannot be read
    """

    exit_code = 8


class ReleaseTimeoutError(ReleaseError):
    """The release deadline expired.

    Named ReleaseTimeoutError to avoid shadowing Python's built-in TimeoutError.
    """

    exit_code = 9
