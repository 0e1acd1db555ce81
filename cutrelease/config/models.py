"""Pydantic v2 configuration models for .release.yml.

These models provide:
- Type-safe configuration loading
- Automatic validation
- Default values
- Environment variable override support (RELEASE_ prefix)
"""

import os

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class GitConfig(BaseModel):
    """Git workflow configuration."""

    remote: str = Field(
        default="origin",
        description="Name of the upstream git remote",
    )


class GitHubConfig(BaseModel):
    """GitHub access configuration."""

    access_token: str = Field(
        default="",
        description="GitHub access token (falls back to GH_TOKEN / GITHUB_TOKEN)",
    )

    def resolve_token(self) -> str:
        """Return the configured token or the one from the environment."""
        return (
            self.access_token
            or os.environ.get("GH_TOKEN", "")
            or os.environ.get("GITHUB_TOKEN", "")
        )


class ReleaseSettings(BaseModel):
    """Release workflow settings."""

    mode: str = Field(
        default="indirect",
        description="Release mode: direct or indirect",
    )
    comment: str = Field(
        default="",
        description="Text prepended to the release notes",
    )
    max_workers: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Upper bound for concurrent uploads, builds and page fetches",
    )


class ChangelogConfig(BaseModel):
    """Changelog generation configuration."""

    file: str = Field(
        default="CHANGELOG.md",
        description="Changelog file committed with each release",
    )
    generator: str = Field(
        default="git-cliff",
        description="Changelog generator command",
    )
    config_file: str | None = Field(
        default=None,
        description="Generator config file (e.g., cliff.toml)",
    )


class BuildTarget(BaseModel):
    """A single build command and the artifacts it produces."""

    name: str = Field(description="Target name, used in progress output")
    command: str = Field(description="Build command")
    artifacts: list[str] = Field(
        default_factory=list,
        description="Glob patterns (relative to the project root) of produced files",
    )
    label: str | None = Field(
        default=None,
        description="Label for uploaded assets (defaults to the file name)",
    )


class BuildConfig(BaseModel):
    """Artifact build configuration."""

    enabled: bool = Field(default=True, description="Build and upload artifacts")
    detect_files: list[str] = Field(
        default_factory=lambda: ["pyproject.toml"],
        description="Files whose presence means the project can be built",
    )
    targets: list[BuildTarget] = Field(
        default_factory=lambda: [
            BuildTarget(
                name="python",
                command="python -m build",
                artifacts=["dist/*.whl", "dist/*.tar.gz"],
            )
        ],
        description="Build targets, run concurrently",
    )


class TimeoutsConfig(BaseModel):
    """Timeout configuration in seconds."""

    release: int = Field(
        default=600,
        ge=60,
        description="Deadline for one whole release invocation",
    )
    git_operations: int = Field(
        default=120,
        ge=10,
        description="Git operation timeout",
    )
    api_calls: int = Field(
        default=60,
        ge=10,
        description="Hosting API call timeout",
    )
    build: int = Field(
        default=480,
        ge=30,
        description="Build command timeout",
    )


class ReleaseConfig(BaseSettings):
    """Root configuration model for .release.yml.

    Supports environment variable overrides with RELEASE_ prefix.
    Example: RELEASE_RELEASE__MODE=direct
    """

    git: GitConfig = Field(default_factory=GitConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    release: ReleaseSettings = Field(default_factory=ReleaseSettings)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)

    model_config = {
        "env_prefix": "RELEASE_",
        "env_nested_delimiter": "__",
    }

    @field_validator("git")
    @classmethod
    def validate_remote(cls, v: GitConfig) -> GitConfig:
        if not v.remote or v.remote.strip() != v.remote:
            raise ValueError("git.remote must be a non-empty name without whitespace")
        return v
