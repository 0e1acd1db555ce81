"""Version resolution.

The current version comes from the git history: the latest semantic-version
tag merged into HEAD, advanced to the next patch version (with a
pre-release suffix) whenever HEAD has moved past it. The release version is
derived from it by the bump flags.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace

from cutrelease.context import ReleaseFlags
from cutrelease.git.base import VCS
from cutrelease.utils.version import SemVer

logger = logging.getLogger(__name__)

INITIAL_VERSION = SemVer(0, 1, 0)


class VersionSource(ABC):
    @abstractmethod
    def current_version(self) -> SemVer:
        """Return the current version.

        Raises:
            GitError: If the version cannot be computed
        """


class GitTagVersionSource(VersionSource):
    """Compute the current version from git tags.

    - No semver tag: 0.1.0-{commits}.{signature}
    - HEAD at the tag with a clean tree: the tag version
    - Otherwise: next patch of the tag, -{commits ahead}.{signature}

    The signature is the short HEAD SHA for a clean tree and "dev" otherwise.
    """

    def __init__(self, vcs: VCS) -> None:
        self.vcs = vcs

    def current_version(self) -> SemVer:
        clean = self.vcs.is_clean()
        signature = self.vcs.head()[:7] if clean else "dev"

        tags = self.vcs.semver_tags()
        if not tags:
            count = self.vcs.commit_count("HEAD")
            return replace(INITIAL_VERSION, prerelease=(str(count), signature))

        tag = tags[0]
        version = SemVer.parse(tag)
        ahead = self.vcs.commit_count(f"{tag}..HEAD")
        logger.debug("Latest tag %s, %d commit(s) ahead, clean=%s", tag, ahead, clean)

        if ahead > 0 or not clean:
            return replace(version.next(), prerelease=(str(ahead), signature))
        return version


class VersionResolver:
    """Resolve the release version from the current version and bump flags.

    Precedence is major, then minor, then patch (the default). The result is
    always a plain MAJOR.MINOR.PATCH triple.
    """

    def __init__(self, source: VersionSource) -> None:
        self.source = source

    def resolve(self, flags: ReleaseFlags) -> SemVer:
        return self.bump(self.source.current_version(), flags)

    @staticmethod
    def bump(current: SemVer, flags: ReleaseFlags) -> SemVer:
        if flags.major:
            return current.release_major()
        if flags.minor:
            return current.release_minor()
        return current.release_patch()


__all__ = ["GitTagVersionSource", "VersionResolver", "VersionSource", "INITIAL_VERSION"]
