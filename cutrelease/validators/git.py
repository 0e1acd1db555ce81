"""Git state validators for the validate command.

These checks only read local state; the release itself re-checks the
branch and working copy against the hosting service before any change.
"""

from typing import ClassVar

from cutrelease.exceptions import GitError, HostingError
from cutrelease.git.queries import (
    get_remote_url,
    get_uncommitted_files,
    is_clean,
    parse_remote_url,
)
from cutrelease.hosting.github import parse_github_path
from cutrelease.validators.base import CheckContext, ValidationResult, Validator


class GitCleanValidator(Validator):
    """Validates that the git working directory is clean."""

    name: ClassVar[str] = "git_clean"
    description: ClassVar[str] = "Check if working directory is clean"
    category: ClassVar[str] = "git"

    def validate(self, context: CheckContext) -> ValidationResult:
        try:
            if is_clean(cwd=context.project_root):
                return ValidationResult.success("Working directory is clean")

            uncommitted_files = get_uncommitted_files(cwd=context.project_root)
            file_list = "\n".join(f"  - {f}" for f in uncommitted_files[:10])
            if len(uncommitted_files) > 10:
                file_list += f"\n  ... and {len(uncommitted_files) - 10} more"

            return ValidationResult.error(
                message="Working directory has uncommitted changes",
                details=f"Uncommitted changes detected:\n{file_list}",
                fix_command="git status",
            )
        except GitError as e:
            return ValidationResult.error(
                message="Failed to check git status",
                details=str(e),
                fix_command="git status",
            )


class GitHubRemoteValidator(Validator):
    """Validates that the upstream remote points at a GitHub repository."""

    name: ClassVar[str] = "github_remote"
    description: ClassVar[str] = "Check that the remote is a GitHub repository"
    category: ClassVar[str] = "git"

    def validate(self, context: CheckContext) -> ValidationResult:
        remote = context.config.git.remote
        try:
            url = get_remote_url(remote, cwd=context.project_root)
            owner, repo = parse_github_path(*parse_remote_url(url))
        except (GitError, HostingError) as e:
            return ValidationResult.error(
                message=f"Remote '{remote}' is not a usable GitHub repository",
                details=str(e),
                fix_command="git remote -v",
            )
        return ValidationResult.success(f"Remote '{remote}' is {owner}/{repo}")


GIT_VALIDATORS: tuple[type[Validator], ...] = (GitHubRemoteValidator, GitCleanValidator)
