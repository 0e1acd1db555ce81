"""Concurrent artifact upload."""

import logging

from cutrelease.build import Artifact
from cutrelease.hosting.base import HostingService
from cutrelease.utils.tasks import TaskGroup

logger = logging.getLogger(__name__)


class ArtifactPublisher:
    """Upload artifacts to a release, one task per artifact.

    The first failed upload cancels the uploads that have not started and is
    raised right away, without waiting for uploads still in flight. Already
    uploaded assets are left in place; a re-run uploads them again by name.
    """

    def __init__(self, hosting: HostingService, max_workers: int = 8) -> None:
        self.hosting = hosting
        self.max_workers = max_workers

    def upload(self, release_id: int, artifacts: list[Artifact]) -> None:
        if not artifacts:
            return

        logger.debug("Uploading %d artifact(s) to release %s", len(artifacts), release_id)
        with TaskGroup(max_workers=self.max_workers, name="upload") as group:
            for artifact in artifacts:
                group.go(self.hosting.upload_release_asset, release_id, artifact.path, artifact.label)
            group.wait()
