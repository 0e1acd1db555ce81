"""Tests for the direct release strategy.

Covers:
- The happy path: draft first, commit and tag, push, then publish
- Admin permission requirement
- Reuse of a draft left behind by an earlier run
- Branch protection restored on every exit path
- Upload failures never touch branch protection
- Local commit and tag discarded after a failure, so a re-run repeats the version
"""

import subprocess
from pathlib import Path
from typing import Any

import pytest

from cutrelease.artifacts import ArtifactPublisher
from cutrelease.changelog import ChangelogGenerator, ChangelogSpec
from cutrelease.context import ReleaseFlags, ReleaseMode
from cutrelease.exceptions import BuildError, GitError, HostingError
from cutrelease.git.repository import GitRepository
from cutrelease.locator import DraftReleaseLocator
from cutrelease.strategies.direct import DirectReleaseStrategy
from cutrelease.utils.version import SemVer
from cutrelease.versioning import GitTagVersionSource, VersionResolver


@pytest.fixture
def strategy(make_strategy: Any) -> DirectReleaseStrategy:
    return make_strategy(DirectReleaseStrategy)


@pytest.fixture
def ctx(make_context: Any) -> Any:
    return make_context("1.3.0", mode=ReleaseMode.DIRECT)


class TestDirectRelease:
    """Happy path of a direct release."""

    def test_creates_commit_and_tag_then_pushes(
        self, strategy: DirectReleaseStrategy, ctx: Any, vcs: Any
    ) -> None:
        strategy.execute(ctx)

        assert vcs.calls == [
            ("head",),
            ("add", "CHANGELOG.md"),
            ("commit", "Release 1.3.0"),
            ("tag", "v1.3.0", "Release 1.3.0", None),
            ("push",),
            ("push_tag", "v1.3.0"),
        ]

    def test_creates_one_draft_and_publishes_it(
        self, strategy: DirectReleaseStrategy, ctx: Any, hosting: Any
    ) -> None:
        strategy.execute(ctx)

        assert hosting.count("create_release") == 1
        created = next(c for c in hosting.calls if c[0] == "create_release")[1]
        assert created.draft is True
        assert created.tag_name == "v1.3.0"
        assert created.target == "main"

        assert len(hosting.releases) == 1
        published = hosting.releases[0]
        assert published.draft is False
        assert published.body == "- feat: add widgets\n"

    def test_relaxes_protection_around_push_only(
        self, strategy: DirectReleaseStrategy, ctx: Any, hosting: Any
    ) -> None:
        strategy.execute(ctx)

        assert hosting.protection == [("main", False), ("main", True)]
        names = hosting.names()
        disabled = names.index("set_branch_protection")
        assert names.index("create_release") < disabled, "Draft must exist before the push"
        assert names.index("update_release") > disabled, "Publish happens inside the relaxed scope"

    def test_comment_precedes_changelog(
        self, strategy: DirectReleaseStrategy, make_context: Any, hosting: Any
    ) -> None:
        strategy.execute(make_context("1.3.0", mode=ReleaseMode.DIRECT, comment="Big one"))

        assert hosting.releases[0].body == "Big one\n\n- feat: add widgets\n"

    def test_changelog_generated_for_future_tag(
        self, strategy: DirectReleaseStrategy, ctx: Any, changelog: Any
    ) -> None:
        strategy.execute(ctx)

        assert [spec.future_tag for spec in changelog.specs] == ["v1.3.0"]

    def test_reuses_existing_draft(
        self, strategy: DirectReleaseStrategy, ctx: Any, hosting: Any
    ) -> None:
        """A draft left behind by a failed run is published instead of duplicated."""
        hosting.add_release("v1.2.9", draft=False)
        existing = hosting.add_release("v1.3.0", draft=True)

        strategy.execute(ctx)

        assert hosting.count("create_release") == 0
        update = next(c for c in hosting.calls if c[0] == "update_release")
        assert update[1] == existing.id

    def test_uploads_artifacts_before_publishing(
        self,
        strategy: DirectReleaseStrategy,
        ctx: Any,
        hosting: Any,
        builder: Any,
        artifact_files: Any,
    ) -> None:
        builder.buildable = True
        builder.outputs = artifact_files

        strategy.execute(ctx)

        assert builder.builds == 1
        assert sorted(label for _, _, label in hosting.uploads) == sorted(
            a.label for a in artifact_files
        )
        names = hosting.names()
        last_upload = max(i for i, n in enumerate(names) if n == "upload_release_asset")
        assert last_upload < names.index("set_branch_protection")


class TestDirectPermission:
    """Direct mode requires admin permission."""

    def test_non_admin_stops_before_any_change(
        self, strategy: DirectReleaseStrategy, ctx: Any, hosting: Any, vcs: Any
    ) -> None:
        hosting.permission = "write"

        with pytest.raises(HostingError, match="admin permission"):
            strategy.execute(ctx)

        assert hosting.names() == ["get_current_user", "get_permission"]
        assert vcs.calls == []

    def test_permission_checked_for_current_user(
        self, strategy: DirectReleaseStrategy, ctx: Any, hosting: Any
    ) -> None:
        hosting.login = "octocat"

        strategy.execute(ctx)

        assert ("get_permission", "octocat") in hosting.calls


class TestDirectFailures:
    """Failures leave the release a draft and the branch protected."""

    def test_push_failure_restores_protection(
        self,
        strategy: DirectReleaseStrategy,
        ctx: Any,
        hosting: Any,
        vcs: Any,
        vcs_error: GitError,
    ) -> None:
        vcs.fail_on["push"] = vcs_error

        with pytest.raises(GitError) as exc_info:
            strategy.execute(ctx)

        assert exc_info.value is vcs_error
        assert hosting.protection == [("main", False), ("main", True)]
        assert hosting.count("update_release") == 0
        assert hosting.releases[0].draft is True

    def test_tag_push_failure_restores_protection(
        self, strategy: DirectReleaseStrategy, ctx: Any, hosting: Any, vcs: Any
    ) -> None:
        vcs.fail_on["push_tag"] = GitError("tag already exists")

        with pytest.raises(GitError, match="tag already exists"):
            strategy.execute(ctx)

        assert hosting.protection == [("main", False), ("main", True)]

    def test_publish_failure_restores_protection(
        self, strategy: DirectReleaseStrategy, ctx: Any, hosting: Any
    ) -> None:
        hosting.fail_on["update_release"] = HostingError("API rate limit exceeded")

        with pytest.raises(HostingError, match="rate limit"):
            strategy.execute(ctx)

        assert hosting.protection == [("main", False), ("main", True)]

    def test_upload_failure_never_touches_protection(
        self,
        strategy: DirectReleaseStrategy,
        ctx: Any,
        hosting: Any,
        builder: Any,
        vcs: Any,
        artifact_files: Any,
    ) -> None:
        """Uploads run before protection is relaxed, so a failed upload cannot
        leave the branch unprotected. Restoration after a failure inside the
        relaxed scope is covered by the push, tag push and publish failure tests.
        """
        builder.buildable = True
        builder.outputs = artifact_files
        hosting.fail_on["upload_release_asset"] = HostingError("upload failed")

        with pytest.raises(HostingError, match="upload failed"):
            strategy.execute(ctx)

        assert hosting.protection == []
        assert "push" not in vcs.names()

    def test_build_failure_stops_before_push(
        self, strategy: DirectReleaseStrategy, ctx: Any, hosting: Any, builder: Any, vcs: Any
    ) -> None:
        builder.buildable = True
        builder.error = BuildError("Build target 'wheel' failed")

        with pytest.raises(BuildError):
            strategy.execute(ctx)

        assert hosting.protection == []
        assert "push" not in vcs.names()
        assert hosting.count("upload_release_asset") == 0

    def test_failed_step_is_reported(
        self,
        strategy: DirectReleaseStrategy,
        ctx: Any,
        vcs: Any,
        reporter: Any,
        read_output: Any,
        vcs_error: GitError,
    ) -> None:
        vcs.fail_on["push"] = vcs_error

        with pytest.raises(GitError):
            strategy.execute(ctx)

        text = read_output(reporter)
        assert "Pushing release commit 1.3.0" in text
        assert "Error: push rejected" in text
        assert "Re-disabling push to main branch" in text


class TestDirectLocalRollback:
    """A failed run leaves nothing local that would shift the next version."""

    def test_build_failure_discards_commit_and_tag(
        self, strategy: DirectReleaseStrategy, ctx: Any, builder: Any, vcs: Any
    ) -> None:
        builder.buildable = True
        builder.error = BuildError("Build target 'wheel' failed")

        with pytest.raises(BuildError):
            strategy.execute(ctx)

        assert vcs.calls[-2:] == [("delete_tag", "v1.3.0"), ("reset", vcs.sha)]

    def test_push_failure_discards_commit_and_tag(
        self, strategy: DirectReleaseStrategy, ctx: Any, vcs: Any, vcs_error: GitError
    ) -> None:
        vcs.fail_on["push"] = vcs_error

        with pytest.raises(GitError):
            strategy.execute(ctx)

        assert vcs.calls[-2:] == [("delete_tag", "v1.3.0"), ("reset", vcs.sha)]

    def test_commit_failure_resets_without_tag(
        self, strategy: DirectReleaseStrategy, ctx: Any, vcs: Any
    ) -> None:
        vcs.fail_on["commit"] = GitError("Failed to create git commit")

        with pytest.raises(GitError):
            strategy.execute(ctx)

        assert "delete_tag" not in vcs.names()
        assert vcs.calls[-1] == ("reset", vcs.sha)

    def test_tag_push_failure_keeps_pushed_commit(
        self, strategy: DirectReleaseStrategy, ctx: Any, vcs: Any
    ) -> None:
        vcs.fail_on["push_tag"] = GitError("tag rejected")

        with pytest.raises(GitError):
            strategy.execute(ctx)

        assert vcs.calls[-1] == ("delete_tag", "v1.3.0")
        assert "reset" not in vcs.names()

    def test_publish_failure_keeps_pushed_tag(
        self,
        strategy: DirectReleaseStrategy,
        ctx: Any,
        hosting: Any,
        vcs: Any,
        reporter: Any,
        read_output: Any,
    ) -> None:
        hosting.fail_on["update_release"] = HostingError("API rate limit exceeded")

        with pytest.raises(HostingError):
            strategy.execute(ctx)

        assert "delete_tag" not in vcs.names()
        assert "reset" not in vcs.names()
        assert "publish the draft release 1.3.0 on GitHub" in read_output(reporter)

    def test_cleanup_failure_keeps_original_error(
        self,
        strategy: DirectReleaseStrategy,
        ctx: Any,
        vcs: Any,
        reporter: Any,
        read_output: Any,
        vcs_error: GitError,
    ) -> None:
        vcs.fail_on["push"] = vcs_error
        vcs.fail_on["reset"] = GitError("Failed to reset")

        with pytest.raises(GitError) as exc_info:
            strategy.execute(ctx)

        assert exc_info.value is vcs_error
        assert "Error: Failed to reset" in read_output(reporter)


def git(cwd: Path, *args: str) -> str:
    return subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
    ).stdout.strip()


class PrependingChangelog(ChangelogGenerator):
    """Writes a fixed section at the top of the changelog file."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def generate(self, spec: ChangelogSpec) -> str:
        section = f"## {spec.future_tag}\n\n- feat: add gadgets\n"
        path = self.root / spec.file
        existing = path.read_text() if path.exists() else ""
        path.write_text(section + existing)
        return section


class TestDirectRerunAgainstGit:
    """Re-running after a failure releases the same version with the same draft."""

    @pytest.fixture
    def repo(self, git_repo_with_remote: Path) -> Path:
        git(git_repo_with_remote, "tag", "-a", "v1.2.0", "-m", "Release 1.2.0")
        (git_repo_with_remote / "gadgets.py").write_text("GADGETS = []\n")
        git(git_repo_with_remote, "add", "gadgets.py")
        git(git_repo_with_remote, "commit", "-m", "feat: add gadgets")
        return git_repo_with_remote

    @pytest.fixture
    def strategy(
        self, repo: Path, hosting: Any, builder: Any, reporter: Any
    ) -> DirectReleaseStrategy:
        return DirectReleaseStrategy(
            vcs=GitRepository(repo),
            hosting=hosting,
            changelog=PrependingChangelog(repo),
            builder=builder,
            locator=DraftReleaseLocator(hosting, max_workers=4),
            publisher=ArtifactPublisher(hosting, max_workers=4),
            reporter=reporter,
        )

    def resolve(self, repo: Path) -> SemVer:
        return VersionResolver(GitTagVersionSource(GitRepository(repo))).resolve(
            ReleaseFlags(minor=True)
        )

    def test_build_failure_then_rerun(
        self,
        repo: Path,
        strategy: DirectReleaseStrategy,
        make_context: Any,
        hosting: Any,
        builder: Any,
    ) -> None:
        base = git(repo, "rev-parse", "HEAD")
        version = self.resolve(repo)
        assert version == SemVer(1, 3, 0)

        builder.buildable = True
        builder.error = BuildError("Build target 'wheel' failed")
        with pytest.raises(BuildError):
            strategy.execute(make_context(str(version), mode=ReleaseMode.DIRECT))

        assert git(repo, "rev-parse", "HEAD") == base
        assert git(repo, "tag", "--list", "v1.3.0") == ""
        assert git(repo, "status", "--porcelain") == ""
        assert self.resolve(repo) == version

        builder.error = None
        strategy.execute(make_context(str(self.resolve(repo)), mode=ReleaseMode.DIRECT))

        assert hosting.count("create_release") == 1
        assert [(r.tag_name, r.draft) for r in hosting.releases] == [("v1.3.0", False)]
        assert "refs/tags/v1.3.0" in git(repo, "ls-remote", "--tags", "origin")

    def test_tag_push_failure_then_rerun(
        self,
        repo: Path,
        tmp_path: Path,
        strategy: DirectReleaseStrategy,
        make_context: Any,
        hosting: Any,
    ) -> None:
        hook = tmp_path / "remote.git" / "hooks" / "pre-receive"
        hook.parent.mkdir(exist_ok=True)
        hook.write_text(
            "#!/bin/sh\n"
            "while read old new ref; do\n"
            '  case "$ref" in refs/tags/*) echo "tags are locked" >&2; exit 1;; esac\n'
            "done\n"
        )
        hook.chmod(0o755)

        with pytest.raises(GitError, match="Failed to push tag"):
            strategy.execute(make_context(str(self.resolve(repo)), mode=ReleaseMode.DIRECT))

        assert git(repo, "tag", "--list", "v1.3.0") == ""
        assert git(repo, "log", "-1", "--format=%s", "origin/main") == "Release 1.3.0"
        assert self.resolve(repo) == SemVer(1, 3, 0)
        assert hosting.protection == [("main", False), ("main", True)]

        hook.unlink()
        strategy.execute(make_context(str(self.resolve(repo)), mode=ReleaseMode.DIRECT))

        assert hosting.count("create_release") == 1
        assert hosting.releases[0].draft is False
