"""Tests for RepoStateValidator.

The validator must fail before anything is changed when the working copy
is on the wrong branch or has uncommitted changes.
"""

from typing import Any

import pytest

from cutrelease.exceptions import GitError, HostingError, StateError
from cutrelease.validators.repo import RepoStateValidator


class TestRepoStateValidator:
    def test_returns_default_branch_and_pulls(
        self, hosting: Any, vcs: Any, reporter: Any
    ) -> None:
        assert RepoStateValidator(hosting, vcs, reporter).validate() == "main"
        assert vcs.names() == ["current_branch", "status", "pull"]

    def test_follows_repository_default_branch(
        self, hosting: Any, vcs: Any, reporter: Any
    ) -> None:
        hosting.default_branch = "trunk"
        vcs.branch = "trunk"

        assert RepoStateValidator(hosting, vcs, reporter).validate() == "trunk"

    def test_wrong_branch(self, hosting: Any, vcs: Any, reporter: Any) -> None:
        vcs.branch = "feature/login"

        with pytest.raises(StateError) as exc_info:
            RepoStateValidator(hosting, vcs, reporter).validate()

        assert exc_info.value.message == "not on default branch"
        assert "feature/login" in (exc_info.value.details or "")
        assert "pull" not in vcs.names()

    def test_dirty_working_copy(self, hosting: Any, vcs: Any, reporter: Any) -> None:
        vcs.status_text = " M src/widgets.py\n?? notes.txt"

        with pytest.raises(StateError) as exc_info:
            RepoStateValidator(hosting, vcs, reporter).validate()

        assert exc_info.value.message == "dirty working copy"
        assert exc_info.value.exit_code == 5
        assert "pull" not in vcs.names()

    def test_branch_checked_before_status(self, hosting: Any, vcs: Any, reporter: Any) -> None:
        vcs.branch = "dev"
        vcs.status_text = " M a.py"

        with pytest.raises(StateError, match="not on default branch"):
            RepoStateValidator(hosting, vcs, reporter).validate()

    def test_hosting_failure(self, hosting: Any, vcs: Any, reporter: Any) -> None:
        hosting.fail_on["get_repository"] = HostingError("Not Found")

        with pytest.raises(HostingError):
            RepoStateValidator(hosting, vcs, reporter).validate()

        assert vcs.calls == []

    def test_pull_failure(self, hosting: Any, vcs: Any, reporter: Any, read_output: Any) -> None:
        vcs.fail_on["pull"] = GitError("Failed to pull the latest changes")

        with pytest.raises(GitError):
            RepoStateValidator(hosting, vcs, reporter).validate()

        assert "Pulling the latest changes on the main branch" in read_output(reporter)
