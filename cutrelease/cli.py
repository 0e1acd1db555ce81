"""Command-line interface for cutrelease.

Provides commands for:
- release: Cut a new release
- semver: Print the current version computed from git
- validate: Check release prerequisites
- init-config: Generate configuration
- status: Show what the next release would be
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from cutrelease import __version__
from cutrelease.config.defaults import write_default_config
from cutrelease.config.loader import load_config
from cutrelease.context import ReleaseFlags
from cutrelease.exceptions import ReleaseError
from cutrelease.git.repository import GitRepository
from cutrelease.ui import Reporter
from cutrelease.utils.log import configure_logging
from cutrelease.utils.tasks import Deadline
from cutrelease.validators.base import (
    CheckContext,
    ValidationResult,
    ValidationSeverity,
    Validator,
    run_validators,
)
from cutrelease.validators.git import GIT_VALIDATORS
from cutrelease.validators.preflight import PREFLIGHT_VALIDATORS, AccessTokenValidator
from cutrelease.versioning import GitTagVersionSource
from cutrelease.workflow import create_orchestrator

app = typer.Typer(
    name="cutrelease",
    help="Cut releases of GitHub-hosted repositories",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"cutrelease version {__version__}")
        raise typer.Exit()


def print_error(error: ReleaseError) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}")


def display_validation_results(
    results: list[tuple[Validator, ValidationResult]],
    title: str = "Validation Results",
) -> bool:
    """Display validation results in a formatted table.

    Returns:
        True if all validations passed (no errors)
    """
    table = Table(title=title)
    table.add_column("Status", style="bold", width=8)
    table.add_column("Check", style="cyan")
    table.add_column("Message")

    has_errors = False

    for validator, result in results:
        if not result.passed:
            status = "[red]FAIL[/red]"
            has_errors = True
        elif result.severity == ValidationSeverity.WARNING:
            status = "[yellow]WARN[/yellow]"
        else:
            status = "[green]PASS[/green]"

        table.add_row(status, validator.name, escape(result.message))

    console.print(table)

    for _, result in results:
        if result.severity != ValidationSeverity.INFO and result.details:
            console.print(f"\n[red]Details:[/red] {escape(result.details)}")
            if result.fix_command:
                console.print(f"[yellow]Fix:[/yellow] {escape(result.fix_command)}")

    return not has_errors


@app.callback()
def main(
    version: bool = typer.Option(  # noqa: B008
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Cut releases of GitHub-hosted repositories.

    Resolves the next version, generates the changelog, tags the release
    and publishes it on GitHub, either directly or through a pull request.
    """


@app.command()
def release(
    patch: bool = typer.Option(False, "--patch", help="Release a patch version (default)"),  # noqa: B008
    minor: bool = typer.Option(False, "--minor", help="Release a minor version"),  # noqa: B008
    major: bool = typer.Option(False, "--major", help="Release a major version"),  # noqa: B008
    comment: str = typer.Option(  # noqa: B008
        "",
        "--comment",
        "-m",
        help="Text to put before the changelog in the release notes",
    ),
    mode: str | None = typer.Option(  # noqa: B008
        None,
        "--mode",
        help="Release mode: direct or indirect (overrides the configuration)",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    verbose: bool = typer.Option(  # noqa: B008
        False,
        "--verbose",
        "-v",
        help="Log commands and API calls",
    ),
) -> None:
    """Cut a new release.

    In direct mode the release commit and tag are pushed to the default
    branch. In indirect mode a pull request is opened first; run the
    command again after it is merged to tag and publish the release.

    Examples:
        cutrelease release                 # 1.2.0 -> 1.2.1
        cutrelease release --minor         # 1.2.0 -> 1.3.0
        cutrelease release --major --mode direct
    """
    configure_logging(verbose)
    reporter = Reporter(console)
    flags = ReleaseFlags(patch=patch, minor=minor, major=major, comment=comment, mode=mode)

    try:
        project_root = Path.cwd()
        cfg = load_config(config, project_root=project_root)
        deadline = Deadline(cfg.timeouts.release)
        orchestrator = create_orchestrator(cfg, project_root, reporter, deadline=deadline)
        ctx = orchestrator.run(flags)

    except ReleaseError as e:
        print_error(e)
        console.print(
            Panel(
                "[bold red]Release failed[/bold red]\n"
                "Fix the problem and re-run the command; completed steps are safe to repeat.",
                border_style="red",
            )
        )
        raise typer.Exit(code=e.exit_code) from None

    console.print(
        Panel(
            f"[bold green]Release {ctx.version} ({ctx.mode.value} mode) completed successfully![/bold green]",
            border_style="green",
        )
    )


@app.command()
def semver(
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
) -> None:
    """Print the current semantic version computed from git tags."""
    try:
        project_root = Path.cwd()
        cfg = load_config(config, project_root=project_root)
        vcs = GitRepository(
            project_root, remote=cfg.git.remote, timeout=cfg.timeouts.git_operations
        )
        console.print(str(GitTagVersionSource(vcs).current_version()))
    except ReleaseError as e:
        print_error(e)
        raise typer.Exit(code=e.exit_code) from None


@app.command()
def validate(
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
) -> None:
    """Validate release prerequisites without making changes.

    Runs:
    - Tooling checks (git, gh, changelog generator)
    - Credentials check (GitHub access token)
    - Git checks (GitHub remote, clean working directory)
    """
    try:
        project_root = Path.cwd()
        cfg = load_config(config, project_root=project_root)
        context = CheckContext(project_root=project_root, config=cfg)
        validators = [*PREFLIGHT_VALIDATORS, AccessTokenValidator, *GIT_VALIDATORS]
        results = run_validators(validators, context)

        if display_validation_results(results):
            console.print("\n[green]All validations passed![/green]")
        else:
            console.print("\n[red]Some validations failed.[/red]")
            raise typer.Exit(code=1)

    except ReleaseError as e:
        print_error(e)
        raise typer.Exit(code=e.exit_code) from None


@app.command(name="init-config")
def init_config(
    output: Path = typer.Option(  # noqa: B008
        Path(".release.yml"),
        "--output",
        "-o",
        help="Output path for configuration file",
    ),
    force: bool = typer.Option(  # noqa: B008
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
) -> None:
    """Generate a release configuration file.

    Examples:
        cutrelease init-config
        cutrelease init-config -o config/release_conf.yml
    """
    if output.exists() and not force:
        console.print(f"[red]Configuration already exists:[/red] {output}")
        console.print("Use --force to overwrite")
        raise typer.Exit(code=1)

    try:
        write_default_config(output)
    except ReleaseError as e:
        print_error(e)
        raise typer.Exit(code=e.exit_code) from None

    console.print(f"[green]Configuration written to:[/green] {output}")


@app.command()
def status(
    minor: bool = typer.Option(False, "--minor", help="Preview a minor release"),  # noqa: B008
    major: bool = typer.Option(False, "--major", help="Preview a major release"),  # noqa: B008
    mode: str | None = typer.Option(None, "--mode", help="Release mode to preview"),  # noqa: B008
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
) -> None:
    """Show the repository, versions and mode of the next release."""
    try:
        project_root = Path.cwd()
        cfg = load_config(config, project_root=project_root)
        orchestrator = create_orchestrator(cfg, project_root, Reporter(console))
        preview = orchestrator.preview(ReleaseFlags(minor=minor, major=major, mode=mode))

        table = Table(title="Release Status")
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Repository", f"{preview.owner}/{preview.repo}")
        table.add_row("Default Branch", preview.default_branch)
        table.add_row("Current Branch", preview.current_branch)
        table.add_row("Current Version", str(preview.current_version))
        table.add_row("Next Version", str(preview.next_version))
        table.add_row("Release Tag", preview.next_version.tag_name)
        table.add_row("Mode", preview.mode.value)

        console.print(table)

    except ReleaseError as e:
        print_error(e)
        raise typer.Exit(code=e.exit_code) from None


if __name__ == "__main__":
    app()
