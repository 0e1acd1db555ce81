"""Hosting service data models.

Responses from the hosting API are validated into frozen pydantic models.
A payload that fails validation is reported as a HostingError, since an
unexpected response shape means the workflow cannot reason about remote
state.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from cutrelease.exceptions import HostingError


class HostedModel(BaseModel):
    """Base for API models: immutable, tolerant of extra fields."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Repository(HostedModel):
    full_name: str = ""
    default_branch: str
    html_url: str = ""


class User(HostedModel):
    login: str


class HostedRelease(HostedModel):
    """A release record owned by the hosting service.

    Attributes:
        id: Release identifier used for updates and asset uploads
        name: Display name
        tag_name: Tag the release points to (may not exist yet for drafts)
        target: Branch or commit the tag is created from
        draft: Whether the release is still a draft
        prerelease: Whether the release is marked as a pre-release
        body: Release notes
        html_url: Web URL of the release
    """

    id: int
    name: str = ""
    tag_name: str
    target: str = Field(default="", alias="target_commitish")
    draft: bool = False
    prerelease: bool = False
    body: str = ""
    html_url: str = ""

    @field_validator("name", "body", "target", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class PullRequest(HostedModel):
    number: int
    state: str
    title: str = ""
    merge_commit_sha: str | None = None
    merged: bool = False
    html_url: str = ""


class SearchItem(HostedModel):
    number: int
    title: str
    state: str = ""
    html_url: str = ""


class IssueSearchResult(HostedModel):
    total_count: int
    items: list[SearchItem] = Field(default_factory=list)


class ReleasePage(HostedModel):
    """One page of releases plus the number of the last available page."""

    releases: list[HostedRelease]
    page: int = 1
    last_page: int = 1


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_model(model: type[ModelT], payload: Any, what: str) -> ModelT:
    """Validate an API payload.

    Raises:
        HostingError: If the payload does not have the expected shape
    """
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise HostingError(
            f"Unexpected response shape for {what}",
            details=str(e),
        ) from e


__all__ = [
    "HostedRelease",
    "IssueSearchResult",
    "PullRequest",
    "ReleasePage",
    "Repository",
    "SearchItem",
    "User",
    "parse_model",
]
