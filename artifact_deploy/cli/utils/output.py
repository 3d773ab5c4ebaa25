# artifact_deploy/cli/utils/output.py
"""Output formatting utilities"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...constants import (
    EMOJI_ERROR,
    EMOJI_SUCCESS,
    EMOJI_WARNING,
    MSG_DEPLOY_SKIPPED,
    MSG_DEPLOY_SUCCESS,
    MSG_PRE_SEED_SUCCESS,
)
from ...exceptions import ArtifactDeployError
from ...models import DeploymentStatus, DeployResult

console = Console()


def format_deploy_result(result: DeployResult) -> None:
    """Format and display deploy or pre-seed result"""
    if result.action == "pre_seed":
        headline = MSG_PRE_SEED_SUCCESS.format(name=result.name, version=result.version)
    elif result.deployed:
        headline = MSG_DEPLOY_SUCCESS.format(name=result.name, version=result.version)
    else:
        headline = MSG_DEPLOY_SKIPPED.format(name=result.name, version=result.version)

    lines = [
        f"[green]{headline}[/green]",
        "",
        f"[bold]Release:[/bold] {result.release_path}",
        f"[bold]Cached artifact:[/bold] {result.cached_artifact}",
        f"[bold]Artifact changed:[/bold] {'yes' if result.artifact_changed else 'no'}",
    ]

    if result.resolution:
        lines.append(f"[bold]Decision:[/bold] {result.resolution.decision.value}")

    if result.hooks_run:
        lines.append(f"[bold]Hooks:[/bold] {', '.join(result.hooks_run)}")

    if result.pruned_versions:
        lines.append(f"[bold]Pruned:[/bold] {', '.join(result.pruned_versions)}")

    for warning in result.warnings:
        lines.append(f"[yellow]{EMOJI_WARNING} {warning}[/yellow]")

    if result.duration is not None:
        lines.append(f"[dim]Duration: {result.duration:.2f}s[/dim]")

    title = "Pre-seed Result" if result.action == "pre_seed" else "Deploy Result"
    console.print(Panel("\n".join(lines), title=title, border_style="green"))


def format_status(status: DeploymentStatus) -> None:
    """Display current version and release history of a target"""
    current = status.current_version or "[dim]none[/dim]"
    console.print(f"[bold]{status.name}[/bold] at {status.deploy_to}")
    console.print(f"Current: [green]{current}[/green]")

    if not status.previous_releases:
        console.print("[yellow]No previous releases[/yellow]")
    else:
        table = Table(title="Previous Releases")
        table.add_column("Version", style="cyan")
        table.add_column("Modified")
        table.add_column("Cached")

        for release in status.previous_releases:
            cached = EMOJI_SUCCESS if release.version in status.cached_versions else ""
            table.add_row(
                release.version,
                release.modified_at.strftime("%Y-%m-%d %H:%M:%S"),
                cached,
            )

        console.print(table)


def format_error(error: ArtifactDeployError) -> None:
    """Display a fatal deployment error"""
    code = f" ({error.error_code})" if error.error_code else ""
    console.print(
        Panel(
            f"[red]{EMOJI_ERROR} {error}[/red]",
            title=f"Deployment Error{code}",
            border_style="red",
        )
    )
