"""Abstract hosting service interface.

The release strategies only talk to the hosting service through
HostingService. A service instance is bound to one repository.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from cutrelease.hosting.models import (
    HostedRelease,
    IssueSearchResult,
    PullRequest,
    ReleasePage,
    Repository,
    User,
)

PERMISSION_ADMIN = "admin"

# Search qualifiers understood by the issue search endpoint
IS_PULL_REQUEST = "is:pr"
IS_MERGED = "is:merged"
IS_OPEN = "is:open"
IN_TITLE = "in:title"


def repo_scope(owner: str, repo: str) -> str:
    return f"repo:{owner}/{repo}"


@dataclass(frozen=True)
class SearchQuery:
    """Free-text keywords followed by search qualifiers.

    Renders as the keywords and qualifiers joined by single spaces, e.g.
    ``RELEASE 1.3.0 is:pr is:merged in:title repo:acme/widgets``.
    """

    keywords: str
    qualifiers: tuple[str, ...] = ()

    def __str__(self) -> str:
        return " ".join([self.keywords, *self.qualifiers]).strip()


def pull_request_query(title: str, owner: str, repo: str, state: str) -> SearchQuery:
    """Query for pull requests with a title in one repository.

    Args:
        title: Title keywords
        owner: Repository owner
        repo: Repository name
        state: Either IS_MERGED or IS_OPEN
    """
    return SearchQuery(
        keywords=title,
        qualifiers=(IS_PULL_REQUEST, state, IN_TITLE, repo_scope(owner, repo)),
    )


@dataclass(frozen=True)
class ReleaseParams:
    """Fields to set on a release. None means "leave unchanged"."""

    name: str | None = None
    tag_name: str | None = None
    target: str | None = None
    draft: bool | None = None
    prerelease: bool | None = None
    body: str | None = None

    def payload(self) -> dict[str, Any]:
        data = {k: v for k, v in asdict(self).items() if v is not None}
        if "target" in data:
            data["target_commitish"] = data.pop("target")
        return data


@dataclass(frozen=True)
class CreatePullParams:
    title: str
    head: str
    base: str
    body: str = ""

    def payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UpdatePullParams:
    title: str | None = None
    body: str | None = None
    base: str | None = None

    def payload(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


class HostingService(ABC):
    """Operations on the hosted repository.

    Implementations raise HostingError for failed calls and for responses
    with an unexpected shape.
    """

    owner: str
    repo: str

    @abstractmethod
    def get_repository(self) -> Repository:
        ...

    @abstractmethod
    def get_permission(self, user: str) -> str:
        """Return the permission level of a user ("admin", "write", ...)."""

    @abstractmethod
    def set_branch_protection(self, branch: str, enabled: bool) -> None:
        """Enable or disable push protection for administrators on a branch."""

    @abstractmethod
    def list_releases(self, page_size: int, page: int) -> ReleasePage:
        ...

    @abstractmethod
    def create_release(self, params: ReleaseParams) -> HostedRelease:
        ...

    @abstractmethod
    def update_release(self, release_id: int, params: ReleaseParams) -> HostedRelease:
        ...

    @abstractmethod
    def upload_release_asset(self, release_id: int, path: Path, label: str) -> None:
        ...

    @abstractmethod
    def create_pull_request(self, params: CreatePullParams) -> PullRequest:
        ...

    @abstractmethod
    def update_pull_request(self, number: int, params: UpdatePullParams) -> PullRequest:
        ...

    @abstractmethod
    def get_pull_request(self, number: int) -> PullRequest:
        ...

    @abstractmethod
    def get_current_user(self) -> User:
        ...

    @abstractmethod
    def search_issues(
        self,
        page_size: int,
        page: int,
        sort: str,
        order: str,
        query: SearchQuery,
    ) -> IssueSearchResult:
        ...
