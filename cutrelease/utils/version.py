"""Semantic version value type.

Versions follow https://semver.org: MAJOR.MINOR.PATCH with optional
pre-release and build metadata identifiers. Git tags carry a 'v' prefix.
"""

import re
from dataclasses import dataclass
from typing import Literal

from cutrelease.exceptions import ValidationError

BumpType = Literal["major", "minor", "patch"]

TAG_PREFIX = "v"

SEMVER_PATTERN = re.compile(
    r"^v?(\d+)\.(\d+)\.(\d+)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@dataclass(frozen=True)
class SemVer:
    """An immutable semantic version.

    Attributes:
        major: Major version number
        minor: Minor version number
        patch: Patch version number
        prerelease: Pre-release identifiers (e.g., ("3", "a1b2c3d"))
        metadata: Build metadata identifiers
    """

    major: int = 0
    minor: int = 0
    patch: int = 0
    prerelease: tuple[str, ...] = ()
    metadata: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise ValidationError(
                f"Negative version component in {self.major}.{self.minor}.{self.patch}",
                fix_hint="Version components must be non-negative integers",
            )

    @classmethod
    def parse(cls, text: str) -> "SemVer":
        """Parse a semantic version string.

        Args:
            text: Version string (e.g., '1.2.3', 'v1.2.3-rc.1+build.5')

        Returns:
            Parsed SemVer

        Raises:
            ValidationError: If the string is not a semantic version

        Examples:
            >>> SemVer.parse('v1.2.3')
            SemVer(major=1, minor=2, patch=3, prerelease=(), metadata=())
        """
        if not text or not text.strip():
            raise ValidationError(
                "Empty version string",
                fix_hint="Provide a valid semantic version (e.g., '1.2.3')",
            )

        match = SEMVER_PATTERN.match(text.strip())
        if not match:
            raise ValidationError(
                f"Invalid version format: '{text}'",
                details="Version must follow semantic versioning: MAJOR.MINOR.PATCH[-PRE][+META]",
                fix_hint="Use format like '1.2.3' or 'v1.2.3'",
            )

        major, minor, patch, pre, meta = match.groups()
        return cls(
            major=int(major),
            minor=int(minor),
            patch=int(patch),
            prerelease=tuple(pre.split(".")) if pre else (),
            metadata=tuple(meta.split(".")) if meta else (),
        )

    @classmethod
    def is_valid(cls, text: str) -> bool:
        """Check whether a string is a semantic version."""
        return bool(text) and SEMVER_PATTERN.match(text.strip()) is not None

    @property
    def core(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    @property
    def tag_name(self) -> str:
        """Git tag name for this version (e.g., 'v1.2.3')."""
        return f"{TAG_PREFIX}{self}"

    def next(self) -> "SemVer":
        """Return the next patch version without pre-release or metadata."""
        return SemVer(self.major, self.minor, self.patch + 1)

    def release_patch(self) -> "SemVer":
        """Return the patch release for this version.

        The version source already reports the next version whenever HEAD is
        ahead of the last tag, so a patch release only drops the suffixes.
        """
        return SemVer(self.major, self.minor, self.patch)

    def release_minor(self) -> "SemVer":
        """Return the minor release for this version."""
        return SemVer(self.major, self.minor + 1, 0)

    def release_major(self) -> "SemVer":
        """Return the major release for this version."""
        return SemVer(self.major + 1, 0, 0)

    def bump(self, kind: BumpType) -> "SemVer":
        """Return the release version for a bump kind.

        Raises:
            ValidationError: If kind is not major, minor, or patch
        """
        if kind == "major":
            return self.release_major()
        if kind == "minor":
            return self.release_minor()
        if kind == "patch":
            return self.release_patch()
        raise ValidationError(
            f"Invalid bump type: '{kind}'",
            fix_hint="Use 'major', 'minor', or 'patch'",
        )

    def __str__(self) -> str:
        tail = ""
        if self.prerelease:
            tail += "-" + ".".join(self.prerelease)
        if self.metadata:
            tail += "+" + ".".join(self.metadata)
        return f"{self.major}.{self.minor}.{self.patch}{tail}"


__all__ = ["BumpType", "SemVer", "SEMVER_PATTERN", "TAG_PREFIX"]
