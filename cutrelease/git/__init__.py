"""Git operations and utilities.

This module provides a clean API for git operations used in the release tool.
All operations use cutrelease.utils.shell.run() for safe command execution
and raise GitError on failures.
"""

from cutrelease.git.base import VCS
from cutrelease.git.operations import (
    add,
    checkout,
    commit,
    delete_branch,
    pull,
    push,
    push_branch,
    push_tag,
    tag,
)
from cutrelease.git.queries import (
    count_commits,
    get_commit_sha,
    get_current_branch,
    get_latest_tag,
    get_log_subjects,
    get_remote_url,
    get_semver_tags,
    get_status,
    get_uncommitted_files,
    is_clean,
    parse_remote_url,
)
from cutrelease.git.repository import GitRepository

__all__ = [
    # Interface and implementation
    "VCS",
    "GitRepository",
    # Query operations
    "is_clean",
    "get_status",
    "get_current_branch",
    "get_remote_url",
    "parse_remote_url",
    "get_latest_tag",
    "get_semver_tags",
    "get_commit_sha",
    "count_commits",
    "get_log_subjects",
    "get_uncommitted_files",
    # Modification operations
    "add",
    "commit",
    "tag",
    "pull",
    "push",
    "push_tag",
    "push_branch",
    "checkout",
    "delete_branch",
]
