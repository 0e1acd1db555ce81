"""Release orchestration.

Runs the preflight checks, validates repository state, resolves the
version and hands over to the strategy for the configured release mode.
Every step runs in order; the first failure stops the release and a re-run
is the recovery path.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from cutrelease.artifacts import ArtifactPublisher
from cutrelease.build import BuildSubsystem, CommandBuilder
from cutrelease.changelog import ChangelogGenerator, ChangelogSpec, CliffChangelogGenerator
from cutrelease.config.models import ReleaseConfig
from cutrelease.context import ReleaseContext, ReleaseFlags, ReleaseMode
from cutrelease.exceptions import ConfigurationError
from cutrelease.git.base import VCS
from cutrelease.git.repository import GitRepository
from cutrelease.hosting.base import HostingService
from cutrelease.hosting.github import GitHubService, parse_github_path
from cutrelease.locator import DraftReleaseLocator
from cutrelease.strategies import DirectReleaseStrategy, IndirectReleaseStrategy, ReleaseStrategy
from cutrelease.ui import Reporter
from cutrelease.utils.tasks import Deadline
from cutrelease.utils.version import SemVer
from cutrelease.validators.base import CheckContext
from cutrelease.validators.preflight import run_preflight
from cutrelease.validators.repo import RepoStateValidator
from cutrelease.versioning import GitTagVersionSource, VersionResolver, VersionSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleasePreview:
    """What a release would do, computed without side effects."""

    owner: str
    repo: str
    default_branch: str
    current_branch: str
    current_version: SemVer
    next_version: SemVer
    mode: ReleaseMode


class ReleaseOrchestrator:
    """Top-level driver for one release invocation."""

    def __init__(
        self,
        owner: str,
        repo: str,
        vcs: VCS,
        hosting: HostingService,
        version_source: VersionSource,
        changelog: ChangelogGenerator,
        builder: BuildSubsystem,
        changelog_spec: ChangelogSpec,
        reporter: Reporter,
        mode: str = ReleaseMode.INDIRECT.value,
        comment: str = "",
        max_workers: int = 8,
        preflight: Callable[[], object] | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.vcs = vcs
        self.hosting = hosting
        self.version_source = version_source
        self.changelog = changelog
        self.builder = builder
        self.changelog_spec = changelog_spec
        self.reporter = reporter
        self.mode = mode
        self.comment = comment
        self.max_workers = max_workers
        self.preflight = preflight

    def strategy_for(self, mode: ReleaseMode) -> ReleaseStrategy:
        strategy_class = (
            DirectReleaseStrategy if mode == ReleaseMode.DIRECT else IndirectReleaseStrategy
        )
        return strategy_class(
            vcs=self.vcs,
            hosting=self.hosting,
            changelog=self.changelog,
            builder=self.builder,
            locator=DraftReleaseLocator(self.hosting, max_workers=self.max_workers),
            publisher=ArtifactPublisher(self.hosting, max_workers=self.max_workers),
            reporter=self.reporter,
        )

    def run(self, flags: ReleaseFlags) -> ReleaseContext:
        """Cut a release.

        Returns:
            The context of the completed invocation

        Raises:
            SpecError: If the release mode is unknown
            ReleaseError: On the first failed step
        """
        mode = ReleaseMode.parse(flags.mode or self.mode)

        if self.preflight is not None:
            with self.reporter.step("Running preflight checks"):
                self.preflight()

        default_branch = RepoStateValidator(self.hosting, self.vcs, self.reporter).validate()

        with self.reporter.step("Resolving the release version"):
            version = VersionResolver(self.version_source).resolve(flags)

        ctx = ReleaseContext(
            version=version,
            owner=self.owner,
            repo=self.repo,
            default_branch=default_branch,
            changelog_spec=self.changelog_spec,
            mode=mode,
            comment=flags.comment or self.comment,
        )

        self.reporter.panel(
            f"[bold]Release {version}[/bold]\n"
            f"Repository: {self.owner}/{self.repo}\n"
            f"Tag: {ctx.tag_name}\n"
            f"Mode: {mode.value}",
            title="Starting Release",
        )

        self.strategy_for(mode).execute(ctx)
        return ctx

    def preview(self, flags: ReleaseFlags) -> ReleasePreview:
        """Compute the release that run() would cut, without changing anything."""
        mode = ReleaseMode.parse(flags.mode or self.mode)
        repository = self.hosting.get_repository()
        current = self.version_source.current_version()
        return ReleasePreview(
            owner=self.owner,
            repo=self.repo,
            default_branch=repository.default_branch,
            current_branch=self.vcs.current_branch(),
            current_version=current,
            next_version=VersionResolver.bump(current, flags),
            mode=mode,
        )


def create_orchestrator(
    config: ReleaseConfig,
    project_root: Path,
    reporter: Reporter,
    deadline: Deadline | None = None,
) -> ReleaseOrchestrator:
    """Wire the production collaborators for a project.

    Raises:
        ConfigurationError: If no access token is available
        GitError: If the remote cannot be read
        HostingError: If the remote is not a GitHub repository
    """
    token = config.github.resolve_token()
    if not token:
        raise ConfigurationError(
            "No GitHub access token",
            details="Set github.access_token in the configuration, or GH_TOKEN / GITHUB_TOKEN",
            fix_hint="export GH_TOKEN=$(gh auth token)",
        )

    timeouts = config.timeouts
    vcs = GitRepository(
        project_root,
        remote=config.git.remote,
        timeout=timeouts.git_operations,
        deadline=deadline,
    )
    owner, repo = parse_github_path(*vcs.remote())
    logger.debug("Releasing %s/%s from %s", owner, repo, project_root)

    hosting = GitHubService(owner, repo, token, timeout=timeouts.api_calls, deadline=deadline)
    changelog = CliffChangelogGenerator(
        project_root, timeout=timeouts.git_operations, deadline=deadline
    )
    builder = CommandBuilder(
        project_root,
        config.build,
        max_workers=config.release.max_workers,
        timeout=timeouts.build,
        deadline=deadline,
    )
    changelog_spec = ChangelogSpec(
        file=config.changelog.file,
        generator=config.changelog.generator,
        config_file=config.changelog.config_file,
    )

    return ReleaseOrchestrator(
        owner=owner,
        repo=repo,
        vcs=vcs,
        hosting=hosting,
        version_source=GitTagVersionSource(vcs),
        changelog=changelog,
        builder=builder,
        changelog_spec=changelog_spec,
        reporter=reporter,
        mode=config.release.mode,
        comment=config.release.comment,
        max_workers=config.release.max_workers,
        preflight=partial(run_preflight, CheckContext(project_root, config)),
    )
