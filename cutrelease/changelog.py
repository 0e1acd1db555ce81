"""Changelog generation.

The generator renders the section for the upcoming release, prepends it to
the changelog file, and returns the section text. The section is rendered
for the *future* tag, which does not exist yet when the generator runs.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path

from cutrelease.exceptions import ChangelogError, GitError
from cutrelease.git import queries as git_queries
from cutrelease.utils.shell import ShellError, is_command_available, run
from cutrelease.utils.tasks import Deadline

logger = logging.getLogger(__name__)

H2_TITLE = re.compile(r"^##(?!#)[^\n]*\n", re.MULTILINE)

CHANGELOG_HEADER = "# Changelog\n"


def strip_title(text: str) -> str:
    """Remove the H2 title lines and leading blank lines of a changelog section."""
    return H2_TITLE.sub("", text).lstrip("\n")


@dataclass(frozen=True)
class ChangelogSpec:
    """What to generate and where to write it.

    Attributes:
        file: Changelog file, relative to the project root
        future_tag: Tag of the release being prepared
        generator: Generator command (git-cliff)
        config_file: Generator configuration file
    """

    file: str = "CHANGELOG.md"
    future_tag: str = ""
    generator: str = "git-cliff"
    config_file: str | None = None

    def for_tag(self, tag: str) -> "ChangelogSpec":
        return replace(self, future_tag=tag)


class ChangelogGenerator(ABC):
    @abstractmethod
    def generate(self, spec: ChangelogSpec) -> str:
        """Write the changelog for spec.future_tag and return the new section.

        Raises:
            ChangelogError: If generation fails
        """


class CliffChangelogGenerator(ChangelogGenerator):
    """Generate with git-cliff, falling back to the git log subjects."""

    def __init__(
        self,
        project_root: Path,
        timeout: float = 120,
        deadline: Deadline | None = None,
    ) -> None:
        self.project_root = project_root
        self.step_timeout = timeout
        self.deadline = deadline

    def _timeout(self) -> float:
        if self.deadline is None:
            return self.step_timeout
        return self.deadline.timeout(self.step_timeout)

    def generate(self, spec: ChangelogSpec) -> str:
        if not spec.future_tag:
            raise ChangelogError(
                "No release tag given for the changelog",
                fix_hint="Resolve the release version before generating the changelog",
            )

        if is_command_available(spec.generator):
            section = self._from_cliff(spec)
        else:
            logger.debug("%s not installed, using git log", spec.generator)
            section = self._from_git_log(spec)

        self._prepend(spec.file, section)
        return section

    def _from_cliff(self, spec: ChangelogSpec) -> str:
        cmd = [spec.generator, "--tag", spec.future_tag, "--unreleased", "--strip", "all"]
        if spec.config_file:
            cmd.extend(["--config", spec.config_file])
        try:
            result = run(cmd, cwd=self.project_root, timeout=self._timeout())
        except ShellError as e:
            raise ChangelogError(
                f"{spec.generator} failed",
                details=e.stderr or str(e),
                fix_hint="Run the generator manually to see the full error",
            ) from e

        section = result.stdout.strip()
        if not section:
            raise ChangelogError(
                f"{spec.generator} produced an empty changelog",
                fix_hint="Check that there are commits since the last release",
            )
        return section + "\n"

    def _from_git_log(self, spec: ChangelogSpec) -> str:
        try:
            last_tag = git_queries.get_latest_tag(cwd=self.project_root, timeout=self._timeout())
            rev = f"{last_tag}..HEAD" if last_tag else "HEAD"
            subjects = git_queries.get_log_subjects(
                rev, cwd=self.project_root, timeout=self._timeout()
            )
        except (GitError, ShellError) as e:
            raise ChangelogError("Failed to read commits for the changelog", details=str(e)) from e

        lines = [f"## {spec.future_tag} ({date.today().isoformat()})", ""]
        lines.extend(f"- {subject}" for subject in subjects)
        return "\n".join(lines) + "\n"

    def _prepend(self, file: str, section: str) -> None:
        path = self.project_root / file
        try:
            existing = path.read_text(encoding="utf-8") if path.exists() else ""
            if existing.startswith(CHANGELOG_HEADER):
                rest = existing[len(CHANGELOG_HEADER):].lstrip("\n")
                content = f"{CHANGELOG_HEADER}\n{section}\n{rest}"
            else:
                content = f"{CHANGELOG_HEADER}\n{section}\n{existing}"
            path.write_text(content.rstrip("\n") + "\n", encoding="utf-8")
        except OSError as e:
            raise ChangelogError(f"Failed to write {path}", details=str(e)) from e


__all__ = [
    "ChangelogGenerator",
    "ChangelogSpec",
    "CliffChangelogGenerator",
    "strip_title",
]
