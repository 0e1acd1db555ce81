"""Default configuration generation.

Writes a commented .release.yml populated with the model defaults and
an auto-detected build setup.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from cutrelease.config.models import BuildConfig, BuildTarget, ReleaseConfig
from cutrelease.exceptions import ConfigurationError


def detect_build_config(project_root: Path) -> BuildConfig:
    """Pick build defaults from the files present in the project.

    Args:
        project_root: Project root directory

    Returns:
        BuildConfig for the detected project type (disabled when nothing matches)
    """
    if (project_root / "pyproject.toml").exists():
        return BuildConfig()
    if (project_root / "go.mod").exists():
        return BuildConfig(
            detect_files=["go.mod"],
            targets=[
                BuildTarget(
                    name="go",
                    command="go build -o bin/ ./...",
                    artifacts=["bin/*"],
                )
            ],
        )
    if (project_root / "package.json").exists():
        return BuildConfig(
            detect_files=["package.json"],
            targets=[
                BuildTarget(name="npm", command="npm pack", artifacts=["*.tgz"]),
            ],
        )
    return BuildConfig(enabled=False)


def generate_default_config(project_root: Path) -> dict[str, Any]:
    """Build the default configuration as plain data.

    The access token is left empty so it is never written to disk by default.
    """
    config = ReleaseConfig(build=detect_build_config(project_root))
    return config.model_dump(mode="json")


def generate_config_header() -> str:
    """Generate the YAML header comment."""
    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    return f"""# ============================================================================
# Release Configuration - .release.yml
# ============================================================================
# Auto-generated on {now}
#
# The GitHub token is read from GH_TOKEN or GITHUB_TOKEN when
# github.access_token is empty. Every value can be overridden with
# RELEASE_<SECTION>__<KEY> environment variables.
#
# To regenerate:
#   cutrelease init-config --force
# ============================================================================

"""


def write_default_config(output_path: Path, project_root: Path | None = None) -> None:
    """Generate and write a default configuration file.

    Args:
        output_path: Path to write configuration
        project_root: Project root directory (defaults to cwd)

    Raises:
        ConfigurationError: If file cannot be written
    """
    if project_root is None:
        project_root = Path.cwd()

    config = generate_default_config(project_root)

    sections = [
        ("git", "Git Remote"),
        ("github", "GitHub Access"),
        ("release", "Release Workflow"),
        ("changelog", "Changelog"),
        ("build", "Artifacts"),
        ("timeouts", "Timeouts (seconds)"),
    ]

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(generate_config_header())

            for section_key, section_title in sections:
                f.write(f"# {'-' * 76}\n")
                f.write(f"# {section_title}\n")
                f.write(f"# {'-' * 76}\n")

                yaml_str = yaml.safe_dump(
                    {section_key: config[section_key]},
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                )
                f.write(yaml_str)
                f.write("\n")

    except PermissionError:
        raise ConfigurationError(
            f"Permission denied writing config to {output_path}",
            fix_hint="Check file permissions or use a different location",
        ) from None
    except OSError as e:
        raise ConfigurationError(
            f"Failed to write config to {output_path}",
            details=str(e),
            fix_hint="Check disk space and path validity",
        ) from e
