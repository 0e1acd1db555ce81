"""Artifact builds.

A build subsystem is detected with a cheap existence probe, then runs its
build targets concurrently. Each target appends the files it produced to a
shared ArtifactCollection, which the upload step reads once.
"""

import logging
import shlex
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from cutrelease.config.models import BuildConfig, BuildTarget
from cutrelease.exceptions import BuildError
from cutrelease.utils.shell import ShellError, run
from cutrelease.utils.tasks import Deadline, TaskGroup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Artifact:
    """A built file to attach to a release.

    Attributes:
        path: File on disk
        label: Display label of the uploaded asset
    """

    path: Path
    label: str


class ArtifactCollection:
    """Thread-safe accumulator of artifacts, appended by concurrent build workers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: list[Artifact] = []

    def append(self, *artifacts: Artifact) -> None:
        with self._lock:
            self._items.extend(artifacts)

    def snapshot(self) -> list[Artifact]:
        """Return a copy of the collected artifacts."""
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class BuildSubsystem(ABC):
    @abstractmethod
    def detect(self) -> bool:
        """Return True if the project can be built. Must be cheap."""

    @abstractmethod
    def build(self, sink: ArtifactCollection) -> None:
        """Build all targets and append their outputs to sink.

        Raises:
            BuildError: If any target fails
        """


class CommandBuilder(BuildSubsystem):
    """Runs the configured build commands."""

    def __init__(
        self,
        project_root: Path,
        config: BuildConfig,
        max_workers: int = 8,
        timeout: float = 480,
        deadline: Deadline | None = None,
    ) -> None:
        self.project_root = project_root
        self.config = config
        self.max_workers = max_workers
        self.step_timeout = timeout
        self.deadline = deadline

    def _timeout(self) -> float:
        if self.deadline is None:
            return self.step_timeout
        return self.deadline.timeout(self.step_timeout)

    def detect(self) -> bool:
        if not self.config.enabled or not self.config.targets:
            return False
        return any((self.project_root / name).exists() for name in self.config.detect_files)

    def build(self, sink: ArtifactCollection) -> None:
        with TaskGroup(max_workers=self.max_workers, name="build") as group:
            for target in self.config.targets:
                group.go(self._build_target, target, sink)
            group.wait()

    def _build_target(self, target: BuildTarget, sink: ArtifactCollection) -> None:
        logger.debug("Building target %s: %s", target.name, target.command)
        try:
            run(shlex.split(target.command), cwd=self.project_root, timeout=self._timeout())
        except ShellError as e:
            raise BuildError(
                f"Build target '{target.name}' failed",
                details=e.stderr or str(e),
                fix_hint=f"Run '{target.command}' manually to see the full error",
            ) from e

        paths = self.collect(target)
        if target.artifacts and not paths:
            raise BuildError(
                f"Build target '{target.name}' produced no artifacts",
                details=f"No files match {', '.join(target.artifacts)}",
                fix_hint="Check the artifact patterns in the build configuration",
            )
        sink.append(*(Artifact(path=p, label=target.label or p.name) for p in paths))

    def collect(self, target: BuildTarget) -> list[Path]:
        """Return the files matching a target's artifact patterns."""
        found: list[Path] = []
        for pattern in target.artifacts:
            for path in sorted(self.project_root.glob(pattern)):
                if path.is_file() and path not in found:
                    found.append(path)
        return found


__all__ = ["Artifact", "ArtifactCollection", "BuildSubsystem", "CommandBuilder"]
