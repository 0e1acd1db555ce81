"""Hosting service interface and the GitHub implementation."""

from cutrelease.hosting.base import (
    IN_TITLE,
    IS_MERGED,
    IS_OPEN,
    IS_PULL_REQUEST,
    PERMISSION_ADMIN,
    CreatePullParams,
    HostingService,
    ReleaseParams,
    SearchQuery,
    UpdatePullParams,
    pull_request_query,
    repo_scope,
)
from cutrelease.hosting.github import GITHUB_DOMAIN, GitHubService, parse_github_path
from cutrelease.hosting.models import (
    HostedRelease,
    IssueSearchResult,
    PullRequest,
    ReleasePage,
    Repository,
    SearchItem,
    User,
)

__all__ = [
    "HostingService",
    "GitHubService",
    "GITHUB_DOMAIN",
    "parse_github_path",
    # Models
    "HostedRelease",
    "IssueSearchResult",
    "PullRequest",
    "ReleasePage",
    "Repository",
    "SearchItem",
    "User",
    # Request parameters
    "CreatePullParams",
    "ReleaseParams",
    "UpdatePullParams",
    # Search grammar
    "SearchQuery",
    "pull_request_query",
    "repo_scope",
    "IS_PULL_REQUEST",
    "IS_MERGED",
    "IS_OPEN",
    "IN_TITLE",
    "PERMISSION_ADMIN",
]
