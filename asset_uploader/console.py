"""Console rendering helpers for the asset-up CLI."""
from __future__ import annotations

from typing import Any, Dict, Mapping

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .models import FolderStats, ResultSummary

console = Console()


def human_size(value: int) -> str:
    size = float(max(value, 0))
    units = ["B", "KB", "MB", "GB", "TB"]
    unit_idx = 0
    while size >= 1024.0 and unit_idx < len(units) - 1:
        size /= 1024.0
        unit_idx += 1
    if unit_idx == 0:
        return f"{int(size)} {units[unit_idx]}"
    return f"{size:.2f} {units[unit_idx]}"


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, rendered)

    console.print(
        Panel(
            table,
            title="[bold green]asset-up[/bold green]",
            subtitle="[dim]asset uploader CLI[/dim]",
            border_style="blue",
        )
    )


def render_result_summary(summary: ResultSummary) -> None:
    if not summary:
        console.print("[yellow]No files uploaded (all skipped or none found).[/yellow]")
        return

    table = Table(title="Uploaded files", title_style="bold green")
    table.add_column("Path", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("URL", style="dim", overflow="fold")
    for path, entry in sorted(summary.items()):
        table.add_row(path, human_size(entry["size"]), entry["url"])
    console.print(table)


def render_folder_summary(folders: Mapping[str, FolderStats]) -> None:
    if not folders:
        return

    table = Table(title="Folders", title_style="bold green")
    table.add_column("Folder", style="cyan")
    table.add_column("Files", justify="right")
    table.add_column("Size", justify="right")
    for folder, stats in sorted(folders.items()):
        table.add_row(folder, str(stats.count), human_size(stats.size))
    console.print(table)
