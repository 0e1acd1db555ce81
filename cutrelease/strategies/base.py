"""Shared release strategy steps and the branch protection scope."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from cutrelease.artifacts import ArtifactPublisher
from cutrelease.build import BuildSubsystem
from cutrelease.changelog import ChangelogGenerator, strip_title
from cutrelease.context import ReleaseContext
from cutrelease.exceptions import ProtectionRestoreError
from cutrelease.git.base import VCS
from cutrelease.hosting.base import HostingService
from cutrelease.hosting.models import HostedRelease
from cutrelease.locator import DraftReleaseLocator
from cutrelease.ui import Reporter


@contextmanager
def relaxed_branch_protection(
    hosting: HostingService, branch: str, reporter: Reporter
) -> Iterator[None]:
    """Disable push protection on branch for the duration of the block.

    Protection is re-enabled exactly once when the block exits, whatever the
    exit path. If re-enabling fails, ProtectionRestoreError is raised chained
    to the error that was propagating, and both errors are reported.
    """
    reporter.warn(f"Temporarily enabling push to {branch} branch")
    hosting.set_branch_protection(branch, False)

    error: BaseException | None = None
    try:
        yield
    except BaseException as e:
        error = e
        raise
    finally:
        reporter.warn(f"Re-disabling push to {branch} branch")
        try:
            hosting.set_branch_protection(branch, True)
        except Exception as restore_error:
            reporter.error(restore_error)
            details = str(restore_error)
            if error is not None:
                reporter.error(error)
                details += f"\nTriggered by: {error}"
            raise ProtectionRestoreError(
                f"Failed to re-enable branch protection on {branch}; the branch is UNPROTECTED",
                details=details,
                fix_hint=f"Re-enable 'Include administrators' protection for {branch} manually",
                original=error,
            ) from (error or restore_error)


class ReleaseStrategy(ABC):
    """A way of getting the release commit onto the default branch."""

    def __init__(
        self,
        vcs: VCS,
        hosting: HostingService,
        changelog: ChangelogGenerator,
        builder: BuildSubsystem,
        locator: DraftReleaseLocator,
        publisher: ArtifactPublisher,
        reporter: Reporter,
    ) -> None:
        self.vcs = vcs
        self.hosting = hosting
        self.changelog = changelog
        self.builder = builder
        self.locator = locator
        self.publisher = publisher
        self.reporter = reporter

    @abstractmethod
    def execute(self, ctx: ReleaseContext) -> None:
        """Run the strategy.

        Raises:
            ReleaseError: On the first failed step
        """

    def generate_changelog(self, ctx: ReleaseContext) -> str:
        """Write the changelog for the future tag and return it without its title."""
        with self.reporter.step("Creating/Updating the changelog"):
            text = self.changelog.generate(ctx.changelog_spec.for_tag(ctx.tag_name))
        return strip_title(text)

    def build_and_upload(self, ctx: ReleaseContext, release: HostedRelease) -> None:
        """Build artifacts if the project is buildable and attach them to release."""
        if not self.builder.detect():
            self.reporter.info("No buildable project detected, skipping artifacts")
            return

        with self.reporter.step("Building artifacts"):
            self.builder.build(ctx.artifacts)

        artifacts = ctx.artifacts.snapshot()
        if not artifacts:
            return
        with self.reporter.step(
            f"Uploading {len(artifacts)} artifact(s) to release {release.name}"
        ):
            self.publisher.upload(release.id, artifacts)


__all__ = ["ReleaseStrategy", "relaxed_branch_protection"]
