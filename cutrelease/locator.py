"""Draft release lookup across paginated release listings."""

import logging
import threading

from cutrelease.exceptions import HostingError
from cutrelease.hosting.base import HostingService
from cutrelease.hosting.models import HostedRelease
from cutrelease.utils.tasks import TaskGroup

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


def match_draft(releases: list[HostedRelease], tag: str) -> HostedRelease | None:
    for release in releases:
        if release.draft and release.tag_name == tag:
            return release
    return None


class DraftReleaseLocator:
    """Find the draft release for a tag.

    Page 1 is fetched synchronously since it usually holds the draft. When
    more pages exist they are fetched concurrently, and the first page that
    yields a match cancels the outstanding fetches.
    """

    def __init__(
        self,
        hosting: HostingService,
        max_workers: int = 8,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.hosting = hosting
        self.max_workers = max_workers
        self.page_size = page_size

    def lookup(self, tag: str) -> HostedRelease | None:
        """Return the draft release for tag, or None if there is none.

        Raises:
            HostingError: If a page cannot be fetched
        """
        first = self.hosting.list_releases(self.page_size, 1)
        match = match_draft(first.releases, tag)
        if match is not None or first.last_page <= 1:
            return match

        logger.debug("Searching release pages 2..%d for %s", first.last_page, tag)
        found: list[HostedRelease] = []
        lock = threading.Lock()

        with TaskGroup(max_workers=self.max_workers, name="locate") as group:

            def fetch(page: int) -> None:
                result = self.hosting.list_releases(self.page_size, page)
                release = match_draft(result.releases, tag)
                if release is not None:
                    with lock:
                        found.append(release)
                    group.cancel()

            for page in range(2, first.last_page + 1):
                group.go(fetch, page)
            group.wait()

        return found[0] if found else None

    def find(self, tag: str) -> HostedRelease:
        """Return the draft release for tag.

        A missing draft for a known tag means remote state was changed out
        of band, so the workflow must stop.

        Raises:
            HostingError: If no draft release exists for tag
        """
        release = self.lookup(tag)
        if release is None:
            raise HostingError(
                f"Draft release for {tag} not found",
                details="The draft may have been deleted or published outside this tool",
                fix_hint="Recreate the draft release or re-run the release from the start",
            )
        return release
