"""Git state query operations.

This module provides read-only git operations for inspecting repository state.
All functions use cutrelease.utils.shell.run() for command execution and raise
GitError on failures.
"""

import re
from pathlib import Path

from cutrelease.exceptions import GitError
from cutrelease.utils.shell import ShellError, run
from cutrelease.utils.version import SemVer

REMOTE_URL_PATTERNS = [
    # https://github.com/owner/repo.git
    re.compile(r"^https?://(?:[^@/]+@)?([^/:]+)(?::\d+)?/(.+?)(?:\.git)?/?$"),
    # ssh://git@github.com/owner/repo.git
    re.compile(r"^ssh://(?:[^@/]+@)?([^/:]+)(?::\d+)?/(.+?)(?:\.git)?/?$"),
    # git@github.com:owner/repo.git
    re.compile(r"^(?:[^@/]+@)?([^/:]+):(.+?)(?:\.git)?/?$"),
]


def parse_remote_url(url: str) -> tuple[str, str]:
    """Split a git remote URL into domain and repository path.

    Supports:
    - https://github.com/owner/repo.git
    - git@github.com:owner/repo.git
    - ssh://git@github.com/owner/repo.git

    Args:
        url: Git remote URL

    Returns:
        Tuple of (domain, path), e.g. ("github.com", "owner/repo")

    Raises:
        GitError: If the URL cannot be parsed
    """
    url = url.strip()
    for pattern in REMOTE_URL_PATTERNS:
        match = pattern.match(url)
        if match:
            return match.group(1), match.group(2)

    raise GitError(
        f"Cannot parse git remote URL: '{url}'",
        fix_hint="Use an https:// or ssh remote URL. Run 'git remote -v' to check.",
    )


def get_status(cwd: Path | None = None, timeout: float = 120) -> str:
    """Return the porcelain status of the working copy (empty when clean).

    Raises:
        GitError: If git status command fails
    """
    try:
        result = run(["git", "status", "--porcelain"], cwd=cwd, timeout=timeout)
        return result.stdout.rstrip()
    except ShellError as e:
        raise GitError(
            "Failed to check git working directory status",
            details=str(e),
            fix_hint="Ensure you are in a git repository and git is installed",
        ) from e


def is_clean(cwd: Path | None = None, timeout: float = 120) -> bool:
    """Check if the working directory is clean (no uncommitted changes)."""
    return not get_status(cwd=cwd, timeout=timeout)


def get_uncommitted_files(cwd: Path | None = None, timeout: float = 120) -> list[str]:
    """List the files with uncommitted changes."""
    status = get_status(cwd=cwd, timeout=timeout)
    return [line[3:] for line in status.splitlines() if len(line) > 3]


def get_current_branch(cwd: Path | None = None, timeout: float = 120) -> str:
    """Get the name of the current git branch.

    Returns:
        Current branch name (e.g., "main"), or "HEAD" when detached

    Raises:
        GitError: If unable to determine current branch
    """
    try:
        result = run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"], cwd=cwd, timeout=timeout
        )
        return result.stdout.strip()
    except ShellError as e:
        raise GitError(
            "Failed to get current branch name",
            details=str(e),
            fix_hint="Ensure you are in a git repository with at least one commit",
        ) from e


def get_remote_url(
    remote: str = "origin", cwd: Path | None = None, timeout: float = 120
) -> str:
    """Get the URL of a git remote.

    Raises:
        GitError: If remote does not exist or cannot be retrieved
    """
    try:
        result = run(["git", "remote", "get-url", remote], cwd=cwd, timeout=timeout)
        return result.stdout.strip()
    except ShellError as e:
        raise GitError(
            f"Failed to get URL for remote '{remote}'",
            details=str(e),
            fix_hint=f"Ensure remote '{remote}' exists. Run 'git remote -v' to list remotes.",
        ) from e


def get_commit_sha(ref: str = "HEAD", cwd: Path | None = None, timeout: float = 120) -> str:
    """Get the full SHA hash of a git commit reference.

    Raises:
        GitError: If reference does not exist or cannot be resolved
    """
    try:
        result = run(["git", "rev-parse", ref], cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            f"Failed to resolve git reference '{ref}'",
            details=str(e),
            fix_hint="Ensure the reference exists. Run 'git log' or 'git tag' to verify.",
        ) from e

    sha = result.stdout.strip()
    if not re.match(r"^[0-9a-f]{40}$", sha):
        raise GitError(
            f"Invalid commit SHA format: {sha}",
            details=f"Expected 40 hex characters for ref '{ref}'",
        )
    return sha


def get_semver_tags(cwd: Path | None = None, timeout: float = 120) -> list[str]:
    """List semantic-version tags reachable from HEAD, newest version first.

    Raises:
        GitError: If git command fails
    """
    try:
        result = run(
            ["git", "tag", "--merged", "HEAD", "--sort=-v:refname"],
            cwd=cwd,
            timeout=timeout,
        )
    except ShellError as e:
        raise GitError(
            "Failed to list git tags",
            details=str(e),
            fix_hint="Ensure you are in a git repository",
        ) from e

    tags = [line.strip() for line in result.stdout.splitlines() if line.strip()]
    return [t for t in tags if SemVer.is_valid(t)]


def get_latest_tag(cwd: Path | None = None, timeout: float = 120) -> str | None:
    """Return the most recent tag reachable from HEAD, or None."""
    result = run(
        ["git", "describe", "--tags", "--abbrev=0"], cwd=cwd, check=False, timeout=timeout
    )
    if result.returncode == 0:
        return result.stdout.strip()
    return None


def count_commits(rev: str = "HEAD", cwd: Path | None = None, timeout: float = 120) -> int:
    """Count the commits in a revision or range (e.g. 'v1.0.0..HEAD').

    Raises:
        GitError: If the revision cannot be resolved
    """
    try:
        result = run(["git", "rev-list", "--count", rev], cwd=cwd, timeout=timeout)
        return int(result.stdout.strip())
    except (ShellError, ValueError) as e:
        raise GitError(
            f"Failed to count commits in '{rev}'",
            details=str(e),
        ) from e


def get_log_subjects(
    rev: str = "HEAD", cwd: Path | None = None, timeout: float = 120
) -> list[str]:
    """Return the commit subjects in a revision or range, newest first."""
    try:
        result = run(
            ["git", "log", rev, "--pretty=format:%s"], cwd=cwd, timeout=timeout
        )
    except ShellError as e:
        raise GitError(
            f"Failed to read git log for '{rev}'",
            details=str(e),
        ) from e
    return [line for line in result.stdout.splitlines() if line.strip()]
