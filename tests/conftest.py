"""Pytest fixtures for cutrelease tests.

Provides common fixtures for:
- Temporary git repositories (real git binary)
- Recording test doubles for the VCS, hosting service, changelog
  generator, build subsystem and version source
- A Reporter writing to an in-memory console
"""

import io
import subprocess
import threading
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from cutrelease.artifacts import ArtifactPublisher
from cutrelease.build import Artifact, ArtifactCollection, BuildSubsystem
from cutrelease.changelog import ChangelogGenerator, ChangelogSpec
from cutrelease.context import ReleaseContext, ReleaseMode
from cutrelease.exceptions import GitError
from cutrelease.git.base import VCS
from cutrelease.hosting.base import (
    IS_MERGED,
    CreatePullParams,
    HostingService,
    ReleaseParams,
    SearchQuery,
    UpdatePullParams,
)
from cutrelease.hosting.models import (
    HostedRelease,
    IssueSearchResult,
    PullRequest,
    ReleasePage,
    Repository,
    SearchItem,
    User,
)
from cutrelease.locator import DraftReleaseLocator
from cutrelease.strategies.base import ReleaseStrategy
from cutrelease.ui import Reporter
from cutrelease.utils.version import SemVer
from cutrelease.versioning import VersionSource


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str) -> None:
    (repo / name).write_text(content)
    git(repo, "add", name)
    git(repo, "commit", "-m", message)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a git repository on branch main with one commit.

    Returns:
        Path to git repository
    """
    repo = tmp_path / "project"
    repo.mkdir()
    git(repo, "init")
    git(repo, "checkout", "-b", "main")
    git(repo, "config", "user.email", "test@test.com")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "commit.gpgsign", "false")
    git(repo, "config", "tag.gpgsign", "false")
    commit_file(repo, "README.md", "# project\n", "Initial commit")
    return repo


@pytest.fixture
def git_repo_with_remote(git_repo: Path, tmp_path: Path) -> Path:
    """A git repository tracking a local bare remote named origin."""
    remote = tmp_path / "remote.git"
    subprocess.run(
        ["git", "init", "--bare", str(remote)], capture_output=True, check=True
    )
    git(git_repo, "remote", "add", "origin", str(remote))
    git(git_repo, "push", "-u", "origin", "main")
    return git_repo


class FakeVCS(VCS):
    """Records every call; configurable state and failures.

    Set ``fail_on[method] = error`` to make a method raise.
    """

    def __init__(self) -> None:
        self.domain = "github.com"
        self.path = "acme/widgets"
        self.branch = "main"
        self.status_text = ""
        self.sha = "0123456789abcdef0123456789abcdef01234567"
        self.tags: list[str] = []
        self.counts: dict[str, int] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.fail_on: dict[str, Exception] = {}

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise self.fail_on[name]

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def remote(self) -> tuple[str, str]:
        self._record("remote")
        return self.domain, self.path

    def current_branch(self) -> str:
        self._record("current_branch")
        return self.branch

    def head(self) -> str:
        self._record("head")
        return self.sha

    def status(self) -> str:
        self._record("status")
        return self.status_text

    def pull(self) -> None:
        self._record("pull")

    def add(self, *paths: str) -> None:
        self._record("add", *paths)

    def commit(self, message: str) -> None:
        self._record("commit", message)

    def tag(self, name: str, message: str, target: str | None = None) -> None:
        self._record("tag", name, message, target)

    def push(self) -> None:
        self._record("push")

    def push_tag(self, name: str) -> None:
        self._record("push_tag", name)

    def push_branch(self, name: str, force: bool = False) -> None:
        self._record("push_branch", name, force)

    def checkout(self, ref: str, create: bool = False) -> None:
        self._record("checkout", ref, create)

    def delete_branch(self, name: str) -> None:
        self._record("delete_branch", name)

    def delete_tag(self, name: str) -> None:
        self._record("delete_tag", name)

    def reset(self, ref: str) -> None:
        self._record("reset", ref)

    def semver_tags(self) -> list[str]:
        self._record("semver_tags")
        return list(self.tags)

    def commit_count(self, rev: str = "HEAD") -> int:
        self._record("commit_count", rev)
        return self.counts.get(rev, 0)


class FakeHosting(HostingService):
    """In-memory hosting service for acme/widgets.

    Releases are paginated from ``releases``. Pull request searches answer
    from ``merged_pulls`` and ``open_pulls`` without
    matching titles. Every call is recorded in
    ``calls``; branch protection changes are also kept in ``protection``.
    """

    def __init__(self) -> None:
        self.owner = "acme"
        self.repo = "widgets"
        self.default_branch = "main"
        self.login = "releaser"
        self.permission = "admin"
        self.releases: list[HostedRelease] = []
        self.merged_pulls: list[SearchItem] = []
        self.open_pulls: list[SearchItem] = []
        self.pulls: dict[int, PullRequest] = {}
        self.protection: list[tuple[str, bool]] = []
        self.page_fetches: list[int] = []
        self.uploads: list[tuple[int, Path, str]] = []
        self.calls: list[tuple[Any, ...]] = []
        self.fail_on: dict[str, Exception] = {}
        self.upload_hook: Any = None
        self.page_hook: Any = None
        self._lock = threading.Lock()
        self._next_id = 100

    def _record(self, name: str, *args: Any) -> None:
        with self._lock:
            self.calls.append((name, *args))
        if name in self.fail_on:
            raise self.fail_on[name]

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def count(self, name: str) -> int:
        return self.names().count(name)

    def add_release(self, tag: str, draft: bool = True, body: str = "") -> HostedRelease:
        self._next_id += 1
        release = HostedRelease(
            id=self._next_id,
            name=tag.lstrip("v"),
            tag_name=tag,
            target_commitish="main",
            draft=draft,
            body=body,
            html_url=f"https://github.com/acme/widgets/releases/{self._next_id}",
        )
        self.releases.append(release)
        return release

    def get_repository(self) -> Repository:
        self._record("get_repository")
        return Repository(full_name="acme/widgets", default_branch=self.default_branch)

    def get_permission(self, user: str) -> str:
        self._record("get_permission", user)
        return self.permission

    def set_branch_protection(self, branch: str, enabled: bool) -> None:
        self._record("set_branch_protection", branch, enabled)
        self.protection.append((branch, enabled))

    def list_releases(self, page_size: int, page: int) -> ReleasePage:
        with self._lock:
            self.page_fetches.append(page)
        self._record("list_releases", page_size, page)
        if self.page_hook is not None:
            self.page_hook(page)
        last_page = max(1, -(-len(self.releases) // page_size))
        start = (page - 1) * page_size
        return ReleasePage(
            releases=self.releases[start:start + page_size],
            page=page,
            last_page=last_page,
        )

    def create_release(self, params: ReleaseParams) -> HostedRelease:
        self._record("create_release", params)
        release = self.add_release(params.tag_name or "", draft=bool(params.draft), body=params.body or "")
        return release

    def update_release(self, release_id: int, params: ReleaseParams) -> HostedRelease:
        self._record("update_release", release_id, params)
        for i, release in enumerate(self.releases):
            if release.id == release_id:
                changes = {k: v for k, v in params.payload().items() if k != "target_commitish"}
                updated = release.model_copy(update=changes)
                self.releases[i] = updated
                return updated
        raise AssertionError(f"unknown release {release_id}")

    def upload_release_asset(self, release_id: int, path: Path, label: str) -> None:
        self._record("upload_release_asset", release_id, path, label)
        if self.upload_hook is not None:
            self.upload_hook(release_id, path, label)
        with self._lock:
            self.uploads.append((release_id, path, label))

    def create_pull_request(self, params: CreatePullParams) -> PullRequest:
        self._record("create_pull_request", params)
        number = len(self.pulls) + 1
        pull = PullRequest(
            number=number,
            state="open",
            title=params.title,
            html_url=f"https://github.com/acme/widgets/pull/{number}",
        )
        self.pulls[number] = pull
        return pull

    def update_pull_request(self, number: int, params: UpdatePullParams) -> PullRequest:
        self._record("update_pull_request", number, params)
        pull = self.pulls.get(number) or PullRequest(number=number, state="open")
        updated = pull.model_copy(update={"title": params.title or pull.title})
        self.pulls[number] = updated
        return updated

    def get_pull_request(self, number: int) -> PullRequest:
        self._record("get_pull_request", number)
        return self.pulls[number]

    def get_current_user(self) -> User:
        self._record("get_current_user")
        return User(login=self.login)

    def search_issues(
        self,
        page_size: int,
        page: int,
        sort: str,
        order: str,
        query: SearchQuery,
    ) -> IssueSearchResult:
        self._record("search_issues", str(query))
        pool = self.merged_pulls if IS_MERGED in query.qualifiers else self.open_pulls
        # Loose like GitHub: every pull request in the state is a hit.
        items = list(pool)
        return IssueSearchResult(total_count=len(items), items=items[:page_size])


class FakeChangelog(ChangelogGenerator):
    def __init__(self) -> None:
        self.specs: list[ChangelogSpec] = []
        self.error: Exception | None = None

    def generate(self, spec: ChangelogSpec) -> str:
        self.specs.append(spec)
        if self.error is not None:
            raise self.error
        return f"## {spec.future_tag} (2026-01-01)\n\n- feat: add widgets\n"


class FakeBuilder(BuildSubsystem):
    def __init__(self) -> None:
        self.buildable = False
        self.outputs: list[Artifact] = []
        self.builds = 0
        self.error: Exception | None = None

    def detect(self) -> bool:
        return self.buildable

    def build(self, sink: ArtifactCollection) -> None:
        self.builds += 1
        if self.error is not None:
            raise self.error
        sink.append(*self.outputs)


class FakeVersionSource(VersionSource):
    def __init__(self, version: SemVer | None = None) -> None:
        self.version = version or SemVer(1, 2, 0)
        self.error: Exception | None = None

    def current_version(self) -> SemVer:
        if self.error is not None:
            raise self.error
        return self.version


@pytest.fixture
def vcs() -> FakeVCS:
    return FakeVCS()


@pytest.fixture
def hosting() -> FakeHosting:
    return FakeHosting()


@pytest.fixture
def changelog() -> FakeChangelog:
    return FakeChangelog()


@pytest.fixture
def builder() -> FakeBuilder:
    return FakeBuilder()


@pytest.fixture
def version_source() -> FakeVersionSource:
    return FakeVersionSource()


@pytest.fixture
def reporter() -> Reporter:
    """Reporter writing to an in-memory console; read it with output()."""
    return Reporter(Console(file=io.StringIO(), width=200, color_system=None))


def output(reporter: Reporter) -> str:
    file = reporter.console.file
    assert isinstance(file, io.StringIO)
    return file.getvalue()


@pytest.fixture
def read_output() -> Any:
    return output


@pytest.fixture
def vcs_error() -> GitError:
    return GitError("push rejected", details="remote: protected branch")


@pytest.fixture
def make_context() -> Any:
    """Factory for a ReleaseContext on acme/widgets, default branch main."""

    def make(
        version: str = "1.3.0",
        mode: ReleaseMode = ReleaseMode.INDIRECT,
        comment: str = "",
    ) -> ReleaseContext:
        return ReleaseContext(
            version=SemVer.parse(version),
            owner="acme",
            repo="widgets",
            default_branch="main",
            changelog_spec=ChangelogSpec(),
            mode=mode,
            comment=comment,
        )

    return make


@pytest.fixture
def make_strategy(
    vcs: FakeVCS,
    hosting: FakeHosting,
    changelog: FakeChangelog,
    builder: FakeBuilder,
    reporter: Reporter,
) -> Any:
    """Factory wiring a strategy class to the shared test doubles."""

    def make(strategy_class: type[ReleaseStrategy]) -> ReleaseStrategy:
        return strategy_class(
            vcs=vcs,
            hosting=hosting,
            changelog=changelog,
            builder=builder,
            locator=DraftReleaseLocator(hosting, max_workers=4),
            publisher=ArtifactPublisher(hosting, max_workers=4),
            reporter=reporter,
        )

    return make


@pytest.fixture
def artifact_files(tmp_path: Path) -> list[Artifact]:
    """Three artifact files on disk."""
    dist = tmp_path / "dist"
    dist.mkdir()
    artifacts = []
    for name in ("widgets-1.3.0.tar.gz", "widgets-1.3.0-py3-none-any.whl", "SHA256SUMS"):
        path = dist / name
        path.write_bytes(b"payload")
        artifacts.append(Artifact(path=path, label=name))
    return artifacts
