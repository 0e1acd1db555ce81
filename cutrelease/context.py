"""Per-invocation release state."""

from dataclasses import dataclass, field
from enum import Enum

from cutrelease.build import ArtifactCollection
from cutrelease.changelog import ChangelogSpec
from cutrelease.exceptions import SpecError
from cutrelease.utils.version import SemVer


class ReleaseMode(str, Enum):
    """How the release commit reaches the default branch.

    - DIRECT: commit and tag are pushed straight to the default branch
    - INDIRECT: the commit goes through a pull request; tagging waits for the merge
    """

    DIRECT = "direct"
    INDIRECT = "indirect"

    @classmethod
    def parse(cls, value: "str | ReleaseMode") -> "ReleaseMode":
        """Parse a mode name.

        Raises:
            SpecError: If the value is not a known mode
        """
        if isinstance(value, ReleaseMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise SpecError(
                f"Invalid release mode: '{value}'",
                fix_hint="Use 'direct' or 'indirect'",
            ) from None


@dataclass(frozen=True)
class ReleaseFlags:
    """Command-line choices for one release."""

    patch: bool = True
    minor: bool = False
    major: bool = False
    comment: str = ""
    mode: str | None = None


@dataclass
class ReleaseContext:
    """Working state of one release invocation.

    Created once the version is resolved and discarded when the command
    returns. Nothing here is persisted.
    """

    version: SemVer
    owner: str
    repo: str
    default_branch: str
    changelog_spec: ChangelogSpec
    mode: ReleaseMode = ReleaseMode.INDIRECT
    comment: str = ""
    artifacts: ArtifactCollection = field(default_factory=ArtifactCollection)

    @property
    def release_name(self) -> str:
        return str(self.version)

    @property
    def tag_name(self) -> str:
        return self.version.tag_name

    @property
    def release_branch(self) -> str:
        return f"release-{self.version}"

    @property
    def pull_title(self) -> str:
        return f"RELEASE {self.version}"

    @property
    def commit_message(self) -> str:
        return f"Release {self.version}"

    def describe(self, changelog: str) -> str:
        """Release description: the comment (if any), a blank line, the changelog."""
        if self.comment:
            return f"{self.comment}\n\n{changelog}"
        return changelog
