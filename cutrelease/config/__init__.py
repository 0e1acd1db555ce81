"""Configuration management for cutrelease."""

from cutrelease.config.loader import load_config
from cutrelease.config.models import (
    BuildConfig,
    BuildTarget,
    ChangelogConfig,
    GitConfig,
    GitHubConfig,
    ReleaseConfig,
    ReleaseSettings,
    TimeoutsConfig,
)

__all__ = [
    "load_config",
    "ReleaseConfig",
    "GitConfig",
    "GitHubConfig",
    "ReleaseSettings",
    "ChangelogConfig",
    "BuildConfig",
    "BuildTarget",
    "TimeoutsConfig",
]
