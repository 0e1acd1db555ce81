"""Repository state validation.

A release is only cut from the default branch of a clean, up-to-date
working copy. Resolving a version against a stale or dirty tree is unsafe,
so this always runs before version resolution.
"""

import logging

from cutrelease.exceptions import StateError
from cutrelease.git.base import VCS
from cutrelease.hosting.base import HostingService
from cutrelease.ui import Reporter

logger = logging.getLogger(__name__)


class RepoStateValidator:
    """Confirm the working copy is releasable and return the default branch.

    Steps, each with its own failure class:
    1. Fetch repository metadata (HostingError)
    2. Current branch must be the default branch (StateError)
    3. Working copy must be clean (StateError)
    4. Pull the latest changes (GitError)
    """

    def __init__(self, hosting: HostingService, vcs: VCS, reporter: Reporter) -> None:
        self.hosting = hosting
        self.vcs = vcs
        self.reporter = reporter

    def validate(self) -> str:
        """Validate repository state.

        Returns:
            Name of the default branch

        Raises:
            HostingError: If repository metadata cannot be fetched
            StateError: If not on the default branch or the tree is dirty
            GitError: If pulling fails
        """
        with self.reporter.step("Validating repository state"):
            repository = self.hosting.get_repository()
            default_branch = repository.default_branch

            branch = self.vcs.current_branch()
            if branch != default_branch:
                raise StateError(
                    "not on default branch",
                    details=f"Current branch is '{branch}', default branch is '{default_branch}'",
                    fix_hint=f"git checkout {default_branch}",
                )

            status = self.vcs.status()
            if status:
                raise StateError(
                    "dirty working copy",
                    details=status,
                    fix_hint="Commit or stash your changes: git status",
                )

        with self.reporter.step(f"Pulling the latest changes on the {default_branch} branch"):
            self.vcs.pull()

        logger.debug("Repository state valid on %s", default_branch)
        return default_branch
