"""Rich terminal display for maccleaner."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from maccleaner.models import (
    CatalogScan,
    CleanReport,
    CommandReport,
    ContainerVolumeItem,
    DockerStatus,
    LargeFolderItem,
    PruneLevel,
    format_size,
)

console = Console()


def show_catalog(scan: CatalogScan) -> None:
    """Display the cleanable items and the total reclaimable space."""
    if not scan.items:
        console.print("[yellow]Nothing to clean.[/yellow]")
        return

    console.print("[bold green]✓ Safe to Clean[/bold green]")
    table = Table(show_header=True, header_style="bold green")
    table.add_column("", width=3)
    table.add_column("Item", style="green")
    table.add_column("Size", justify="right")
    table.add_column("Path")

    for item in scan.items:
        table.add_row(
            "[green]✓[/green]" if item.is_selected else "",
            item.name,
            format_size(item.size_bytes),
            item.path,
        )

    console.print(table)
    console.print(f"[bold]Total Reclaimable:[/bold] [green]{format_size(scan.total_bytes)}[/green]")
    console.print()


def show_large_folders(items: list[LargeFolderItem]) -> None:
    """Display large folders that can only be reviewed."""
    if not items:
        return

    console.print("[bold yellow]! Large System Folders (Review Only)[/bold yellow]")
    table = Table(show_header=True, header_style="bold yellow")
    table.add_column("Folder", style="yellow")
    table.add_column("Size", justify="right")
    table.add_column("Path")

    for item in items:
        table.add_row(item.name, format_size(item.size_bytes), item.path)

    console.print(table)
    console.print()


def show_clean_report(report: CleanReport) -> None:
    """Display the end-of-run cleaning summary."""
    lines = [f"[bold]Space freed:[/bold] {format_size(report.bytes_freed)}"]
    if report.error_count:
        lines.append(f"[red]Errors:[/red] {report.error_count}")
        if report.last_error:
            lines.append(f"[red]Last error:[/red] {report.last_error}")

    console.print(
        Panel(
            "\n".join(lines),
            title="Cleaning Report",
            border_style="green" if report.success else "yellow",
        )
    )


def show_docker_status(status: DockerStatus) -> None:
    if not status.available:
        console.print("Docker: [red]not available[/red]")
        return
    console.print("Docker: [green]available[/green]")
    console.print(f"  Containers: {status.container_count}")
    console.print(f"  Images:     {status.image_count}")


def show_volumes(items: list[ContainerVolumeItem]) -> None:
    """Display dangling docker volumes."""
    if not items:
        console.print("[green]No unused Docker volumes found[/green]")
        return

    table = Table(title="Unused Docker Volumes", show_header=True, header_style="bold")
    table.add_column("", width=3)
    table.add_column("Volume")
    table.add_column("Size", justify="right")

    for item in items:
        table.add_row(
            "[green]✓[/green]" if item.is_selected else "",
            item.name,
            format_size(item.size_bytes),
        )

    console.print(table)
    total = sum(i.size_bytes for i in items if i.is_selected)
    console.print(f"\n[bold]Total selected: {format_size(total)}[/bold]")


def show_prune_level(level: PruneLevel) -> None:
    """Display what a prune level is about to run."""
    style = "red" if level.is_dangerous else "blue"
    commands = "\n".join(f"  $ {c.format(docker='docker')}" for c in level.commands)
    console.print(
        Panel(
            f"{level.description}\n\n{commands}",
            title=f"[bold]{level.title}[/bold]",
            border_style=style,
        )
    )


def show_command_report(report: CommandReport) -> None:
    if report.success:
        console.print("[green]✓ Docker cleanup completed[/green]")
    else:
        console.print("[red]✗ Docker cleanup reported a failure[/red]")
    if report.output.strip():
        console.print(report.output.rstrip(), markup=False, highlight=False)


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message)
