"""Direct release: commit and tag go straight to the default branch."""

from cutrelease.context import ReleaseContext
from cutrelease.exceptions import GitError, HostingError
from cutrelease.hosting.base import PERMISSION_ADMIN, ReleaseParams
from cutrelease.hosting.models import HostedRelease
from cutrelease.strategies.base import ReleaseStrategy, relaxed_branch_protection


class DirectReleaseStrategy(ReleaseStrategy):
    """Release straight to the default branch.

    Steps: check admin permission, create (or reuse) the draft release,
    generate the changelog, create the release commit and tag, build and
    upload artifacts, then push and publish with branch protection relaxed.
    The release stays a draft until the push succeeded. A failure before the
    tag reaches the remote discards the local tag, and the release commit if
    it was not pushed either, so a re-run resolves the same version.
    """

    def execute(self, ctx: ReleaseContext) -> None:
        self.check_permission()
        release = self.prepare_draft(ctx)

        base = self.vcs.head()
        tagged = pushed = tag_pushed = False
        try:
            changelog = self.generate_changelog(ctx)

            with self.reporter.step(f"Creating the release commit and tag {ctx.tag_name}"):
                self.vcs.add(ctx.changelog_spec.file)
                self.vcs.commit(ctx.commit_message)
                self.vcs.tag(ctx.tag_name, ctx.commit_message)
                tagged = True

            self.build_and_upload(ctx, release)

            with relaxed_branch_protection(self.hosting, ctx.default_branch, self.reporter):
                with self.reporter.step(f"Pushing release commit {ctx.version}"):
                    self.vcs.push()
                pushed = True
                with self.reporter.step(f"Pushing release tag {ctx.tag_name}"):
                    self.vcs.push_tag(ctx.tag_name)
                tag_pushed = True
                with self.reporter.step(f"Publishing release {release.name}"):
                    release = self.hosting.update_release(
                        release.id,
                        ReleaseParams(
                            name=release.name,
                            tag_name=release.tag_name,
                            target=release.target,
                            draft=False,
                            prerelease=False,
                            body=ctx.describe(changelog),
                        ),
                    )
        except BaseException:
            if tag_pushed:
                self.reporter.warn(
                    f"Tag {ctx.tag_name} is pushed; publish the draft release {release.name} on GitHub"
                )
            else:
                self.discard_local_release(ctx, None if pushed else base, tagged)
            raise

        self.reporter.success(f"Release {ctx.version} published: {release.html_url}")

    def discard_local_release(self, ctx: ReleaseContext, base: str | None, tagged: bool) -> None:
        """Undo what the failed run left only in the local working copy.

        The unpushed tag is deleted, and when base is given the branch is
        reset to it, dropping the release commit and the changelog edit.
        The version then resolves the same on the next run, which reuses the
        draft release.
        """
        self.reporter.warn(f"Discarding the local release state for {ctx.tag_name}")
        try:
            if tagged:
                self.vcs.delete_tag(ctx.tag_name)
            if base is not None:
                self.vcs.reset(base)
        except GitError as e:
            self.reporter.error(e)

    def check_permission(self) -> None:
        """Require admin permission, since branch protection is relaxed later.

        Raises:
            HostingError: If the acting user is not an admin
        """
        with self.reporter.step("Checking GitHub permission for direct mode"):
            user = self.hosting.get_current_user()
            permission = self.hosting.get_permission(user.login)
            if permission != PERMISSION_ADMIN:
                raise HostingError(
                    "The access token does not have admin permission for direct mode",
                    details=f"{user.login} has '{permission}' permission",
                    fix_hint="Use an admin token or switch to indirect mode",
                )

    def prepare_draft(self, ctx: ReleaseContext) -> HostedRelease:
        """Return the draft release for this version, creating it if needed.

        A draft left behind by an earlier failed run is reused, so re-running
        never duplicates drafts.
        """
        with self.reporter.step(f"Creating the draft release {ctx.version}"):
            existing = self.locator.lookup(ctx.tag_name)
            if existing is not None:
                self.reporter.info(f"Reusing existing draft release {existing.name}")
                return existing

            return self.hosting.create_release(
                ReleaseParams(
                    name=ctx.release_name,
                    tag_name=ctx.tag_name,
                    target=ctx.default_branch,
                    draft=True,
                    prerelease=False,
                )
            )
