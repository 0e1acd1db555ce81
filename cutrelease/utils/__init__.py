"""Utility modules for cutrelease."""

from cutrelease.utils.shell import ShellError, is_command_available, run, strip_ansi
from cutrelease.utils.tasks import Deadline, TaskGroup
from cutrelease.utils.version import SEMVER_PATTERN, TAG_PREFIX, BumpType, SemVer

__all__ = [
    # Shell utilities
    "run",
    "strip_ansi",
    "is_command_available",
    "ShellError",
    # Concurrency
    "TaskGroup",
    "Deadline",
    # Versions
    "SemVer",
    "BumpType",
    "SEMVER_PATTERN",
    "TAG_PREFIX",
]
