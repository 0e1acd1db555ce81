"""Git state modification operations.

This module provides git operations that modify repository state.
All functions use cutrelease.utils.shell.run() for command execution and raise
GitError on failures. Commits and tags are created with the git binary so
the user's author, committer and signing configuration apply.
"""

from pathlib import Path

from cutrelease.exceptions import GitError
from cutrelease.utils.shell import ShellError, run


def add(*paths: str, cwd: Path | None = None, timeout: float = 120) -> None:
    """Stage files.

    Raises:
        GitError: If git add fails
    """
    try:
        run(["git", "add", "--", *paths], cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            f"Failed to stage {', '.join(paths)}",
            details=str(e),
            fix_hint="Ensure the files exist. Run 'git status' to check.",
        ) from e


def commit(message: str, cwd: Path | None = None, timeout: float = 120) -> None:
    """Create a git commit from the staged changes.

    Raises:
        GitError: If commit fails or no changes to commit
    """
    try:
        run(["git", "commit", "-m", message], cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            "Failed to create git commit",
            details=str(e),
            fix_hint="Ensure you have changes staged. Run 'git status' to check.",
        ) from e


def tag(
    name: str,
    message: str | None = None,
    target: str | None = None,
    cwd: Path | None = None,
    timeout: float = 120,
) -> None:
    """Create an annotated git tag.

    Args:
        name: Tag name (e.g., "v1.0.12")
        message: Tag annotation message (defaults to tag name if None)
        target: Commit to tag (defaults to HEAD)
        cwd: Working directory (defaults to current directory)
        timeout: Maximum execution time in seconds

    Raises:
        GitError: If tag creation fails or tag already exists
    """
    cmd = ["git", "tag", "-a", name]
    if target:
        cmd.append(target)
    cmd.extend(["-m", message if message is not None else name])

    try:
        run(cmd, cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            f"Failed to create git tag '{name}'",
            details=str(e),
            fix_hint=f"Ensure tag '{name}' doesn't already exist. Run 'git tag -d {name}' to delete it first.",
        ) from e


def pull(cwd: Path | None = None, timeout: float = 120) -> None:
    """Pull the latest changes for the current branch.

    Raises:
        GitError: If pull fails
    """
    try:
        run(["git", "pull"], cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            "Failed to pull the latest changes",
            details=str(e),
            fix_hint="Resolve conflicts or divergence with the remote, then re-run.",
        ) from e


def push(
    remote: str = "origin",
    branch: str | None = None,
    cwd: Path | None = None,
    timeout: float = 120,
) -> None:
    """Push the current (or given) branch to a remote.

    Raises:
        GitError: If push fails
    """
    cmd = ["git", "push", remote]
    if branch:
        cmd.append(branch)

    try:
        run(cmd, cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            f"Failed to push {branch or 'current branch'} to remote '{remote}'",
            details=str(e),
            fix_hint="Ensure remote exists and you have push access. Check network connectivity.",
        ) from e


def push_tag(
    name: str,
    remote: str = "origin",
    cwd: Path | None = None,
    timeout: float = 120,
) -> None:
    """Push a specific tag to a remote.

    Raises:
        GitError: If push fails or tag doesn't exist
    """
    try:
        run(["git", "push", remote, f"refs/tags/{name}"], cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            f"Failed to push tag '{name}' to remote '{remote}'",
            details=str(e),
            fix_hint=f"Ensure tag '{name}' exists locally. Run 'git tag' to list tags.",
        ) from e


def push_branch(
    name: str,
    remote: str = "origin",
    force: bool = False,
    cwd: Path | None = None,
    timeout: float = 120,
) -> None:
    """Push a branch and set it as upstream.

    Raises:
        GitError: If push fails
    """
    cmd = ["git", "push", "-u", remote]
    if force:
        cmd.append("--force")
    cmd.append(name)

    try:
        run(cmd, cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            f"Failed to push branch '{name}' to remote '{remote}'",
            details=str(e),
            fix_hint="Ensure you have push access to the remote.",
        ) from e


def checkout(
    ref: str,
    create: bool = False,
    cwd: Path | None = None,
    timeout: float = 120,
) -> None:
    """Checkout a branch, optionally creating it.

    Raises:
        GitError: If checkout fails
    """
    cmd = ["git", "checkout"]
    if create:
        cmd.append("-b")
    cmd.append(ref)

    try:
        run(cmd, cwd=cwd, timeout=timeout)
    except ShellError as e:
        action = "create and checkout" if create else "checkout"
        raise GitError(
            f"Failed to {action} '{ref}'",
            details=str(e),
            fix_hint="Ensure the reference exists and working directory is clean",
        ) from e


def delete_branch(name: str, cwd: Path | None = None, timeout: float = 120) -> None:
    """Force-delete a local branch.

    Raises:
        GitError: If deletion fails
    """
    try:
        run(["git", "branch", "-D", name], cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            f"Failed to delete branch '{name}'",
            details=str(e),
            fix_hint="Ensure you are not on the branch being deleted",
        ) from e


def delete_tag(name: str, cwd: Path | None = None, timeout: float = 120) -> None:
    """Delete a local tag.

    Raises:
        GitError: If deletion fails
    """
    try:
        run(["git", "tag", "-d", name], cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            f"Failed to delete tag '{name}'",
            details=str(e),
            fix_hint=f"Run 'git tag -d {name}' manually",
        ) from e


def reset_hard(ref: str, cwd: Path | None = None, timeout: float = 120) -> None:
    """Move the current branch to ref, discarding working tree changes.

    Raises:
        GitError: If reset fails
    """
    try:
        run(["git", "reset", "--hard", ref], cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            f"Failed to reset to '{ref}'",
            details=str(e),
            fix_hint=f"Run 'git reset --hard {ref}' manually",
        ) from e
