"""GitHub hosting service.

Talks to the GitHub REST API through the gh CLI (`gh api`). The access token
is handed to gh through the GH_TOKEN environment variable, so it never shows
up in command lines or logs.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlencode, urlparse

from cutrelease.exceptions import BuildError, HostingError
from cutrelease.hosting.base import (
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
    User,
    parse_model,
)
from cutrelease.utils.shell import ShellError, run
from cutrelease.utils.tasks import Deadline

logger = logging.getLogger(__name__)

GITHUB_DOMAIN = "github.com"
UPLOADS_URL = "https://uploads.github.com"

LINK_LAST_PATTERN = re.compile(r'<([^>]+)>;\s*rel="last"')
HEADER_BODY_SEPARATOR = re.compile(r"\r?\n\r?\n")


def parse_github_path(domain: str, path: str) -> tuple[str, str]:
    """Validate a remote and return (owner, repo).

    Raises:
        HostingError: If the remote is not a GitHub owner/repo path
    """
    if domain != GITHUB_DOMAIN:
        raise HostingError(
            f"Unsupported hosting service: {domain}",
            details="Only repositories hosted on github.com can be released",
        )
    parts = path.strip("/").split("/")
    if len(parts) != 2 or not all(parts):
        raise HostingError(
            f"Unexpected GitHub repository path: '{path}'",
            details="Expected 'owner/repo'",
        )
    return parts[0], parts[1]


def split_include_output(output: str) -> tuple[dict[str, str], str]:
    """Split `gh api --include` output into headers and body.

    Header names are lower-cased. The status line is skipped.
    """
    parts = HEADER_BODY_SEPARATOR.split(output, maxsplit=1)
    head = parts[0]
    body = parts[1] if len(parts) > 1 else ""

    headers: dict[str, str] = {}
    for line in head.splitlines()[1:]:
        name, sep, value = line.partition(":")
        if sep:
            headers[name.strip().lower()] = value.strip()
    return headers, body


def last_page_from_link(link: str | None, current: int) -> int:
    """Read the last page number from a Link header.

    Without a rel="last" link the current page is the last one.
    """
    if not link:
        return current
    match = LINK_LAST_PATTERN.search(link)
    if not match:
        return current
    query = parse_qs(urlparse(match.group(1)).query)
    try:
        return int(query["page"][0])
    except (KeyError, IndexError, ValueError):
        return current


class GitHubService(HostingService):
    """HostingService implementation for one GitHub repository.

    Args:
        owner: Repository owner
        repo: Repository name
        token: Access token
        timeout: Per-call timeout in seconds
        deadline: Invocation-wide deadline
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        timeout: float = 60,
        deadline: Deadline | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self._token = token
        self.step_timeout = timeout
        self.deadline = deadline

    @property
    def repo_path(self) -> str:
        return f"repos/{self.owner}/{self.repo}"

    def _timeout(self) -> float:
        if self.deadline is None:
            return self.step_timeout
        return self.deadline.timeout(self.step_timeout)

    def _gh(
        self,
        endpoint: str,
        method: str = "GET",
        fields: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
        input_file: Path | None = None,
        headers: dict[str, str] | None = None,
        include: bool = False,
    ) -> str:
        """Run `gh api` and return its raw output.

        String fields are passed with -f, other values with -F (typed).
        A JSON body is sent on stdin.

        Raises:
            HostingError: If the call fails
        """
        cmd = ["gh", "api", "-X", method, endpoint]
        if include:
            cmd.append("--include")
        for key, value in (headers or {}).items():
            cmd.extend(["-H", f"{key}: {value}"])
        for key, value in (fields or {}).items():
            flag = "-f" if isinstance(value, str) else "-F"
            cmd.extend([flag, f"{key}={value}"])

        input_text = None
        if body is not None:
            cmd.extend(["--input", "-"])
            input_text = json.dumps(body)
        elif input_file is not None:
            cmd.extend(["--input", str(input_file)])

        logger.debug("gh api %s %s", method, endpoint)
        try:
            result = run(
                cmd,
                timeout=self._timeout(),
                env={"GH_TOKEN": self._token},
                input_text=input_text,
            )
        except ShellError as e:
            raise HostingError(
                f"GitHub API call failed: {method} {endpoint}",
                details=e.stderr or e.stdout or str(e),
                fix_hint="Check the access token scopes and network connectivity",
            ) from e
        return result.stdout

    def _json(self, output: str, what: str) -> Any:
        if not output.strip():
            return None
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise HostingError(
                f"Unexpected response for {what}",
                details=f"Response is not JSON: {output[:200]}",
            ) from e

    def _call(self, endpoint: str, what: str, method: str = "GET", **kwargs: Any) -> Any:
        return self._json(self._gh(endpoint, method=method, **kwargs), what)

    def get_repository(self) -> Repository:
        data = self._call(self.repo_path, "repository")
        return parse_model(Repository, data, "repository")

    def get_permission(self, user: str) -> str:
        data = self._call(
            f"{self.repo_path}/collaborators/{user}/permission", "collaborator permission"
        )
        if not isinstance(data, dict) or not isinstance(data.get("permission"), str):
            raise HostingError(
                "Unexpected response shape for collaborator permission",
                details=str(data),
            )
        return str(data["permission"])

    def set_branch_protection(self, branch: str, enabled: bool) -> None:
        method = "POST" if enabled else "DELETE"
        self._gh(
            f"{self.repo_path}/branches/{branch}/protection/enforce_admins",
            method=method,
        )

    def list_releases(self, page_size: int, page: int) -> ReleasePage:
        output = self._gh(
            f"{self.repo_path}/releases",
            fields={"per_page": page_size, "page": page},
            include=True,
        )
        headers, body = split_include_output(output)
        data = self._json(body, "release list")
        if not isinstance(data, list):
            raise HostingError(
                "Unexpected response shape for release list",
                details=f"Expected a JSON array, got {type(data).__name__}",
            )
        return ReleasePage(
            releases=[parse_model(HostedRelease, item, "release") for item in data],
            page=page,
            last_page=last_page_from_link(headers.get("link"), page),
        )

    def create_release(self, params: ReleaseParams) -> HostedRelease:
        data = self._call(
            f"{self.repo_path}/releases", "release", method="POST", body=params.payload()
        )
        return parse_model(HostedRelease, data, "release")

    def update_release(self, release_id: int, params: ReleaseParams) -> HostedRelease:
        data = self._call(
            f"{self.repo_path}/releases/{release_id}",
            "release",
            method="PATCH",
            body=params.payload(),
        )
        return parse_model(HostedRelease, data, "release")

    def upload_release_asset(self, release_id: int, path: Path, label: str) -> None:
        if not path.is_file():
            raise BuildError(
                f"Artifact not found: {path}",
                fix_hint="Check the build target's artifact patterns",
            )
        query = urlencode({"name": path.name, "label": label})
        self._gh(
            f"{UPLOADS_URL}/{self.repo_path}/releases/{release_id}/assets?{query}",
            method="POST",
            headers={"Content-Type": "application/octet-stream"},
            input_file=path,
        )

    def create_pull_request(self, params: CreatePullParams) -> PullRequest:
        data = self._call(
            f"{self.repo_path}/pulls", "pull request", method="POST", body=params.payload()
        )
        return parse_model(PullRequest, data, "pull request")

    def update_pull_request(self, number: int, params: UpdatePullParams) -> PullRequest:
        data = self._call(
            f"{self.repo_path}/pulls/{number}",
            "pull request",
            method="PATCH",
            body=params.payload(),
        )
        return parse_model(PullRequest, data, "pull request")

    def get_pull_request(self, number: int) -> PullRequest:
        data = self._call(f"{self.repo_path}/pulls/{number}", "pull request")
        return parse_model(PullRequest, data, "pull request")

    def get_current_user(self) -> User:
        return parse_model(User, self._call("user", "user"), "user")

    def search_issues(
        self,
        page_size: int,
        page: int,
        sort: str,
        order: str,
        query: SearchQuery,
    ) -> IssueSearchResult:
        data = self._call(
            "search/issues",
            "issue search",
            fields={
                "q": str(query),
                "sort": sort,
                "order": order,
                "per_page": page_size,
                "page": page,
            },
        )
        return parse_model(IssueSearchResult, data, "issue search")
