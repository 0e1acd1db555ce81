"""Indirect release: the release commit goes through a pull request.

The strategy is re-entered from the top on every invocation and decides
what to do from remote state alone:

1. A merged pull request titled ``RELEASE {version}`` exists: finish the
   release (tag the merge commit, push the tag, upload artifacts, publish
   the draft).
2. An open one exists: push the release branch again and update the pull
   request and its draft release.
3. Neither exists: push the release branch and create both.

Merged wins over open, open wins over neither. The pull request title is
the key that ties invocations together.
"""

import logging

from cutrelease.context import ReleaseContext
from cutrelease.exceptions import HostingError
from cutrelease.hosting.base import (
    IS_MERGED,
    IS_OPEN,
    CreatePullParams,
    ReleaseParams,
    UpdatePullParams,
    pull_request_query,
)
from cutrelease.hosting.models import HostedRelease, PullRequest, SearchItem
from cutrelease.strategies.base import ReleaseStrategy

logger = logging.getLogger(__name__)

SEARCH_SORT = "created"
SEARCH_ORDER = "desc"
# Issue search matches words, not the exact title, so hits are filtered locally.
SEARCH_PAGE_SIZE = 100


class IndirectReleaseStrategy(ReleaseStrategy):
    def execute(self, ctx: ReleaseContext) -> None:
        with self.reporter.step(f"Searching for a merged pull request '{ctx.pull_title}'"):
            merged = self.search_pull(ctx, IS_MERGED)
        if merged is not None:
            logger.debug("Found merged pull request #%d", merged.number)
            self.finish_release(ctx, merged.number)
            return

        with self.reporter.step(f"Searching for an open pull request '{ctx.pull_title}'"):
            opened = self.search_pull(ctx, IS_OPEN)

        changelog = self.generate_changelog(ctx)
        description = ctx.describe(changelog)
        self.push_release_branch(ctx)

        if opened is None:
            pull, release = self.create_pull_and_draft(ctx, description)
        else:
            pull, release = self.update_pull_and_draft(ctx, opened.number, description)

        self.reporter.info(f"Pull request: {pull.html_url}")
        self.reporter.info(f"Draft release: {release.html_url}")
        self.reporter.info("Re-run this command after the pull request is merged to tag and publish the release.")
        self.reporter.info("Re-run this command before merging to update the pull request and the draft release.")

    def search_pull(self, ctx: ReleaseContext, state: str) -> SearchItem | None:
        """Return the newest pull request in state titled exactly ctx.pull_title."""
        query = pull_request_query(ctx.pull_title, ctx.owner, ctx.repo, state)
        result = self.hosting.search_issues(SEARCH_PAGE_SIZE, 1, SEARCH_SORT, SEARCH_ORDER, query)
        for item in result.items:
            if item.title == ctx.pull_title:
                return item
            logger.debug("Ignoring pull request #%d titled %r", item.number, item.title)
        return None

    def push_release_branch(self, ctx: ReleaseContext) -> None:
        """Commit the changelog on a throw-away branch, push it, delete it locally."""
        branch = ctx.release_branch
        with self.reporter.step(f"Pushing release branch {branch}"):
            self.vcs.checkout(branch, create=True)
            self.vcs.add(ctx.changelog_spec.file)
            self.vcs.commit(ctx.commit_message)
            self.vcs.push_branch(branch, force=True)
            self.vcs.checkout(ctx.default_branch)
            self.vcs.delete_branch(branch)

    def create_pull_and_draft(
        self, ctx: ReleaseContext, description: str
    ) -> tuple[PullRequest, HostedRelease]:
        with self.reporter.step(f"Creating pull request '{ctx.pull_title}'"):
            pull = self.hosting.create_pull_request(
                CreatePullParams(
                    title=ctx.pull_title,
                    head=ctx.release_branch,
                    base=ctx.default_branch,
                    body=description,
                )
            )
        with self.reporter.step(f"Creating the draft release {ctx.version}"):
            release = self.hosting.create_release(
                ReleaseParams(
                    name=ctx.release_name,
                    tag_name=ctx.tag_name,
                    target=ctx.default_branch,
                    draft=True,
                    prerelease=False,
                    body=description,
                )
            )
        return pull, release

    def update_pull_and_draft(
        self, ctx: ReleaseContext, number: int, description: str
    ) -> tuple[PullRequest, HostedRelease]:
        with self.reporter.step(f"Updating pull request #{number}"):
            pull = self.hosting.update_pull_request(
                number,
                UpdatePullParams(
                    title=ctx.pull_title,
                    body=description,
                    base=ctx.default_branch,
                ),
            )
        with self.reporter.step(f"Updating the draft release {ctx.version}"):
            draft = self.locator.find(ctx.tag_name)
            release = self.hosting.update_release(
                draft.id,
                ReleaseParams(
                    name=ctx.release_name,
                    tag_name=ctx.tag_name,
                    target=ctx.default_branch,
                    draft=True,
                    prerelease=False,
                    body=description,
                ),
            )
        return pull, release

    def finish_release(self, ctx: ReleaseContext, number: int) -> None:
        """Tag the merge commit and publish the paired draft release."""
        with self.reporter.step(f"Fetching merged pull request #{number}"):
            pull = self.hosting.get_pull_request(number)
            if not pull.merge_commit_sha:
                raise HostingError(
                    f"Pull request #{number} has no merge commit",
                    fix_hint="Check the pull request state on GitHub",
                )

        with self.reporter.step(f"Locating the draft release {ctx.version}"):
            release = self.locator.find(ctx.tag_name)

        with self.reporter.step(f"Pulling the latest changes on the {ctx.default_branch} branch"):
            self.vcs.pull()

        with self.reporter.step(f"Creating release tag {ctx.tag_name} on {pull.merge_commit_sha[:7]}"):
            self.vcs.tag(ctx.tag_name, ctx.commit_message, target=pull.merge_commit_sha)

        with self.reporter.step(f"Pushing release tag {ctx.tag_name}"):
            self.vcs.push_tag(ctx.tag_name)

        self.build_and_upload(ctx, release)

        with self.reporter.step(f"Publishing release {release.name}"):
            release = self.hosting.update_release(
                release.id,
                ReleaseParams(
                    name=release.name,
                    tag_name=release.tag_name,
                    target=release.target,
                    draft=False,
                    prerelease=False,
                    body=release.body,
                ),
            )

        self.reporter.success(f"Release {ctx.version} published: {release.html_url}")
