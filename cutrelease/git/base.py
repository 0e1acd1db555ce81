"""Abstract version control interface used by the release strategies."""

from abc import ABC, abstractmethod


class VCS(ABC):
    """Operations on the local working copy.

    Implementations raise GitError on failure. Commits and tags must honour
    the user's local author and signing configuration.
    """

    @abstractmethod
    def remote(self) -> tuple[str, str]:
        """Return (domain, path) of the upstream remote, e.g. ("github.com", "o/r")."""

    @abstractmethod
    def current_branch(self) -> str:
        ...

    @abstractmethod
    def head(self) -> str:
        """Return the full SHA of HEAD."""

    @abstractmethod
    def status(self) -> str:
        """Return the porcelain status; empty means clean."""

    def is_clean(self) -> bool:
        return not self.status()

    @abstractmethod
    def pull(self) -> None:
        ...

    @abstractmethod
    def add(self, *paths: str) -> None:
        ...

    @abstractmethod
    def commit(self, message: str) -> None:
        ...

    @abstractmethod
    def tag(self, name: str, message: str, target: str | None = None) -> None:
        """Create an annotated tag on target (HEAD when None)."""

    @abstractmethod
    def push(self) -> None:
        """Push the current branch to the upstream remote."""

    @abstractmethod
    def push_tag(self, name: str) -> None:
        ...

    @abstractmethod
    def push_branch(self, name: str, force: bool = False) -> None:
        """Push a branch to the upstream remote and track it."""

    @abstractmethod
    def checkout(self, ref: str, create: bool = False) -> None:
        ...

    @abstractmethod
    def delete_branch(self, name: str) -> None:
        ...

    @abstractmethod
    def delete_tag(self, name: str) -> None:
        ...

    @abstractmethod
    def reset(self, ref: str) -> None:
        """Hard-reset the current branch to ref."""

    @abstractmethod
    def semver_tags(self) -> list[str]:
        """Semantic-version tags merged into HEAD, newest first."""

    @abstractmethod
    def commit_count(self, rev: str = "HEAD") -> int:
        ...
