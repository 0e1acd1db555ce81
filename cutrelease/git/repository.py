"""VCS implementation backed by the git binary."""

from pathlib import Path

from cutrelease.git import operations, queries
from cutrelease.git.base import VCS
from cutrelease.utils.tasks import Deadline


class GitRepository(VCS):
    """A local git working copy.

    Every command is bounded by the per-operation timeout and, when given,
    by the remaining time of the invocation deadline.

    Args:
        path: Working copy root
        remote: Upstream remote name
        timeout: Per-operation timeout in seconds
        deadline: Invocation-wide deadline
    """

    def __init__(
        self,
        path: Path,
        remote: str = "origin",
        timeout: float = 120,
        deadline: Deadline | None = None,
    ) -> None:
        self.path = path
        self.remote_name = remote
        self.step_timeout = timeout
        self.deadline = deadline

    def _timeout(self) -> float:
        if self.deadline is None:
            return self.step_timeout
        return self.deadline.timeout(self.step_timeout)

    def remote(self) -> tuple[str, str]:
        url = queries.get_remote_url(self.remote_name, cwd=self.path, timeout=self._timeout())
        return queries.parse_remote_url(url)

    def current_branch(self) -> str:
        return queries.get_current_branch(cwd=self.path, timeout=self._timeout())

    def head(self) -> str:
        return queries.get_commit_sha("HEAD", cwd=self.path, timeout=self._timeout())

    def status(self) -> str:
        return queries.get_status(cwd=self.path, timeout=self._timeout())

    def pull(self) -> None:
        operations.pull(cwd=self.path, timeout=self._timeout())

    def add(self, *paths: str) -> None:
        operations.add(*paths, cwd=self.path, timeout=self._timeout())

    def commit(self, message: str) -> None:
        operations.commit(message, cwd=self.path, timeout=self._timeout())

    def tag(self, name: str, message: str, target: str | None = None) -> None:
        operations.tag(name, message=message, target=target, cwd=self.path, timeout=self._timeout())

    def push(self) -> None:
        operations.push(self.remote_name, cwd=self.path, timeout=self._timeout())

    def push_tag(self, name: str) -> None:
        operations.push_tag(name, remote=self.remote_name, cwd=self.path, timeout=self._timeout())

    def push_branch(self, name: str, force: bool = False) -> None:
        operations.push_branch(
            name, remote=self.remote_name, force=force, cwd=self.path, timeout=self._timeout()
        )

    def checkout(self, ref: str, create: bool = False) -> None:
        operations.checkout(ref, create=create, cwd=self.path, timeout=self._timeout())

    def delete_branch(self, name: str) -> None:
        operations.delete_branch(name, cwd=self.path, timeout=self._timeout())

    def delete_tag(self, name: str) -> None:
        operations.delete_tag(name, cwd=self.path, timeout=self._timeout())

    def reset(self, ref: str) -> None:
        operations.reset_hard(ref, cwd=self.path, timeout=self._timeout())

    def semver_tags(self) -> list[str]:
        return queries.get_semver_tags(cwd=self.path, timeout=self._timeout())

    def commit_count(self, rev: str = "HEAD") -> int:
        return queries.count_commits(rev, cwd=self.path, timeout=self._timeout())
