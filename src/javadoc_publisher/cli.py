"""
Javadoc Publisher CLI - Command-line interface.

Publish Javadoc of a Maven group to a git pages branch from the terminal.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from javadoc_publisher.config import load_config, resolve_repo_url
from javadoc_publisher.core.exceptions import (
    PublisherError,
    UsageError,
    format_exception,
)
from javadoc_publisher.publish.pipeline import PublishPipeline
from javadoc_publisher.registry.client import MavenCentralClient

app = typer.Typer(
    name="javadoc-publisher",
    help="Javadoc Publisher - publish released Javadoc to a git pages branch",
    no_args_is_help=True,
)
console = Console()

USAGE_EXIT_CODE = 2


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def publish(
    directory: Path = typer.Argument(..., help="Working copy of the pages branch"),
    repo_url: str = typer.Argument(..., help="Git remote URL or scm:git: connection"),
    group_id: str = typer.Argument(..., help="Maven group ID"),
    artifact_id: Optional[str] = typer.Argument(None, help="Publish only this artifact"),
    version: Optional[str] = typer.Argument(None, help="Version of ARTIFACT_ID to publish"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Do everything except commit and push"
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Republish artifacts that are already up to date"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Publish the latest Javadoc of a group, or of one artifact version."""
    _configure_logging(verbose)

    try:
        if (artifact_id is None) != (version is None):
            raise UsageError(
                "ARTIFACT_ID and VERSION must be given together",
                argument="version" if artifact_id is not None else "artifact_id",
            )
        if artifact_id == "" or version == "":
            raise UsageError(
                "ARTIFACT_ID and VERSION must not be empty",
                argument="artifact_id" if artifact_id == "" else "version",
            )
        remote_url = resolve_repo_url(repo_url)
        # unset flags defer to JP_DRY_RUN and JP_FORCE
        config = load_config(dry_run=dry_run or None, force=force or None)
    except UsageError as e:
        console.print(f"[red]{format_exception(e)}[/red]")
        raise typer.Exit(USAGE_EXIT_CODE)
    except PublisherError as e:
        console.print(f"[red]{format_exception(e)}[/red]")
        raise typer.Exit(1)

    target = f"{group_id}:{artifact_id}:{version}" if artifact_id is not None else group_id
    console.print(
        Panel.fit(
            f"[bold blue]Javadoc Publisher[/bold blue]\n"
            f"Artifacts: {target}\n"
            f"Repository: {remote_url} ({config.branch})\n"
            f"Directory: {directory}"
            + ("\n[yellow]DRY-RUN[/yellow]" if config.dry_run else ""),
        )
    )

    try:
        with MavenCentralClient(config) as registry:
            pipeline = PublishPipeline.from_config(directory, registry, config)
            if artifact_id is not None and version is not None:
                result = pipeline.publish(group_id, remote_url, artifact_id, version)
            else:
                result = pipeline.publish_latest(group_id, remote_url)
    except UsageError as e:
        console.print(f"[red]{format_exception(e)}[/red]")
        raise typer.Exit(USAGE_EXIT_CODE)
    except PublisherError as e:
        console.print(f"[red]Failed to publish Javadoc for {group_id}:[/red] {format_exception(e)}")
        raise typer.Exit(1)

    console.print(
        f"[green]Published Javadoc for {result.published_count} artifacts of "
        f"{group_id} to {remote_url}[/green]"
    )


@app.command()
def latest(
    group_id: str = typer.Argument(..., help="Maven group ID"),
):
    """List the latest artifacts of a group as the registry reports them."""
    try:
        config = load_config()
        with MavenCentralClient(config) as registry:
            artifacts = registry.latest_artifacts(group_id)
    except PublisherError as e:
        console.print(f"[red]{format_exception(e)}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Latest Artifacts of {group_id} ({len(artifacts)})")
    table.add_column("Artifact", style="cyan")
    table.add_column("Version")
    table.add_column("Bucket", style="magenta")
    table.add_column("Javadoc")

    for artifact in artifacts:
        javadoc = "[green]yes[/green]" if artifact.has_javadoc else "[dim]no[/dim]"
        table.add_row(artifact.artifact_id, artifact.latest_version, artifact.bucket, javadoc)

    console.print(table)


@app.command("version")
def show_version():
    """Show Javadoc Publisher version."""
    from javadoc_publisher import __version__

    console.print(f"Javadoc Publisher v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
