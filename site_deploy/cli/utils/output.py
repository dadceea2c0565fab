# site_deploy/cli/utils/output.py
"""Output formatting utilities"""

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ...constants import EMOJI_ERROR, EMOJI_INFO, EMOJI_SUCCESS, EMOJI_WARNING
from ...core.project_classifier import get_build_preset
from ...models import DeployEvent, DeployResult, EventKind, Patch, ProjectAnalysis
from ...utils.formatting import format_duration, format_path, format_size

console = Console()

# Larger uploads are summarized instead of listed file by file
MAX_LISTED_FILES = 25

EVENT_STYLES = {
    EventKind.INFO: ("blue", EMOJI_INFO),
    EventKind.SUCCESS: ("green", EMOJI_SUCCESS),
    EventKind.ERROR: ("red", EMOJI_ERROR),
}


def format_analysis(analysis: ProjectAnalysis,
                    patches: List[Patch],
                    target: Optional[str] = None) -> None:
    """Format and display an analysis report"""
    lines = [
        f"[bold]Type:[/bold] {analysis.project_type.value}",
        f"[bold]Files:[/bold] {analysis.file_count} ({format_size(analysis.total_size)})",
        f"[bold]Ignored:[/bold] {len(analysis.ignored)}",
    ]
    if analysis.root_prefix:
        lines.append(f"[bold]Stripped folder:[/bold] {escape(analysis.root_prefix)}")

    preset = get_build_preset(analysis.project_type)
    if preset:
        lines.append(f"[bold]Build command:[/bold] {preset.build_command}")
        lines.append(f"[bold]Output directory:[/bold] {preset.resolve_output_dir(target or '<repo>')}")
    else:
        lines.append("[bold]Build:[/bold] none, published as is")

    console.print(Panel("\n".join(lines), title="Project Analysis", border_style="cyan"))

    table = Table(title="Files", box=box.SIMPLE)
    table.add_column("Path", style="cyan")
    table.add_column("Size", style="dim", justify="right")
    for manifest_file in analysis.manifest[:MAX_LISTED_FILES]:
        table.add_row(escape(format_path(manifest_file.path)), format_size(manifest_file.size))
    if analysis.file_count > MAX_LISTED_FILES:
        table.add_row(f"... {analysis.file_count - MAX_LISTED_FILES} more", "")
    console.print(table)

    if analysis.ignored:
        ignored = Table(title="Ignored", box=box.SIMPLE)
        ignored.add_column("Path", style="dim")
        ignored.add_column("Reason", style="yellow")
        for ignored_file in analysis.ignored:
            ignored.add_row(escape(format_path(ignored_file.path)), escape(ignored_file.reason))
        console.print(ignored)

    if analysis.warnings:
        console.print("\n[bold yellow]Warnings:[/bold yellow]")
        for warning in analysis.warnings:
            console.print(f"  [yellow]{EMOJI_WARNING}[/yellow] {escape(warning)}")

    if patches:
        console.print("\n[bold]Auto-fixes applied at deploy time:[/bold]")
        for patch in patches:
            console.print(f"  • {escape(patch.description)} [dim]({escape(patch.path)})[/dim]")


def print_event(event: DeployEvent) -> None:
    """Print a deployment event as one console line"""
    color, icon = EVENT_STYLES[event.kind]
    line = f"[{color}]{icon}[/{color}] {escape(event.step)}"
    if event.progress is not None:
        line += f" [dim]{event.progress}%[/dim]"
    if event.details:
        line += f" [dim]{escape(event.details)}[/dim]"
    console.print(line)


def format_deploy_result(result: DeployResult) -> None:
    """Format and display deploy operation result"""
    if result.is_success:
        lines = [
            f"[green]{EMOJI_SUCCESS}[/green] Deployment completed successfully!",
            "",
            f"[bold]Provider:[/bold] {result.provider}",
            f"[bold]Target:[/bold] {escape(result.target or '')}",
            f"[bold]Type:[/bold] {result.project_type}",
            f"[bold]URL:[/bold] {result.url}",
        ]
        if result.patches_applied:
            lines.append(f"[bold]Auto-fixes:[/bold] {len(result.patches_applied)}")
        if result.duration is not None:
            lines.append(f"[bold]Duration:[/bold] {format_duration(result.duration)}")

        console.print(Panel("\n".join(lines), title="Deploy Result", border_style="green"))
    else:
        lines = [f"[red]{EMOJI_ERROR} Deploy failed:[/red] {escape(result.message)}"]
        console.print(Panel("\n".join(lines), title="Deploy Error", border_style="red"))


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print error message"""
    if error:
        console.print(f"[red]Error:[/red] {escape(message)}: {escape(str(error))}")
    else:
        console.print(f"[red]Error:[/red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print warning message"""
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}")
