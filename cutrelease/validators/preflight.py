"""Preflight checks for required tooling and credentials."""

from typing import ClassVar

from cutrelease.exceptions import PreflightError
from cutrelease.utils.shell import is_command_available
from cutrelease.validators.base import (
    CheckContext,
    ValidationResult,
    ValidationSeverity,
    Validator,
    run_validators,
)


class GitInstalledValidator(Validator):
    name: ClassVar[str] = "git_installed"
    description: ClassVar[str] = "Check that git is installed"
    category: ClassVar[str] = "preflight"

    def validate(self, context: CheckContext) -> ValidationResult:
        if is_command_available("git"):
            return ValidationResult.success("git is installed")
        return ValidationResult.error(
            "git is not installed",
            details="Commits and tags are created with the git binary",
            fix_command="https://git-scm.com/downloads",
        )


class GhInstalledValidator(Validator):
    name: ClassVar[str] = "gh_installed"
    description: ClassVar[str] = "Check that the GitHub CLI is installed"
    category: ClassVar[str] = "preflight"

    def validate(self, context: CheckContext) -> ValidationResult:
        if is_command_available("gh"):
            return ValidationResult.success("gh is installed")
        return ValidationResult.error(
            "gh CLI is not installed",
            details="The GitHub API is called through 'gh api'",
            fix_command="https://cli.github.com",
        )


class ChangelogGeneratorValidator(Validator):
    """Warns when the changelog generator is missing; the git log fallback is used."""

    name: ClassVar[str] = "changelog_generator"
    description: ClassVar[str] = "Check that the changelog generator is installed"
    category: ClassVar[str] = "preflight"

    def validate(self, context: CheckContext) -> ValidationResult:
        generator = context.config.changelog.generator
        if is_command_available(generator):
            return ValidationResult.success(f"{generator} is installed")
        return ValidationResult.warning(
            f"{generator} is not installed",
            details="The changelog will be generated from git log subjects",
            fix_command="cargo install git-cliff",
        )


class AccessTokenValidator(Validator):
    name: ClassVar[str] = "access_token"
    description: ClassVar[str] = "Check that a GitHub access token is configured"
    category: ClassVar[str] = "credentials"

    def validate(self, context: CheckContext) -> ValidationResult:
        if context.config.github.resolve_token():
            return ValidationResult.success("GitHub access token is set")
        return ValidationResult.error(
            "No GitHub access token",
            details="Set github.access_token, GH_TOKEN or GITHUB_TOKEN",
            fix_command="export GH_TOKEN=$(gh auth token)",
        )


PREFLIGHT_VALIDATORS: tuple[type[Validator], ...] = (
    GitInstalledValidator,
    GhInstalledValidator,
    ChangelogGeneratorValidator,
)


def run_preflight(context: CheckContext) -> list[ValidationResult]:
    """Run the preflight checks.

    Returns:
        Results of all checks (warnings included)

    Raises:
        PreflightError: On the first failed check
    """
    results = []
    for validator, result in run_validators(PREFLIGHT_VALIDATORS, context):
        if not result.passed and result.severity == ValidationSeverity.ERROR:
            raise PreflightError(
                result.message,
                details=result.details,
                fix_hint=result.fix_command,
            )
        results.append(result)
    return results
