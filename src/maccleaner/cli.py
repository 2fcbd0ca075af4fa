"""CLI interface for maccleaner."""

import logging
from concurrent.futures import Future
from typing import Optional

import typer

from maccleaner import __version__
from maccleaner.cleaner import DeletionEngine
from maccleaner.display import (
    confirm_action,
    console,
    show_catalog,
    show_clean_report,
    show_command_report,
    show_docker_status,
    show_large_folders,
    show_prune_level,
    show_volumes,
)
from maccleaner.docker import DockerAdapter
from maccleaner.models import CatalogScan, CleanupLevel, format_size
from maccleaner.scanner import CleanableCatalog
from maccleaner.survey import LargeFolderSurvey
from maccleaner.targets import DEFAULT_CLEANUP_LEVEL, SCAN_TARGETS, get_prune_level, get_target
from maccleaner.tasks import BackgroundRunner, BusyError

app = typer.Typer(
    name="maccleaner",
    help="Reclaim disk space from caches, logs, backups and Docker leftovers",
    add_completion=False,
)
docker_app = typer.Typer(help="Docker cleanup (volumes and prune levels)")
app.add_typer(docker_app, name="docker")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"maccleaner version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging."),
) -> None:
    """maccleaner - reclaim disk space safely."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _wait(start, message: str):
    """Start a background operation and wait for it behind a spinner."""
    try:
        future: Future = start()
    except BusyError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    with console.status(message):
        return future.result()


def _check_names(names: list[str]) -> None:
    unknown = [n for n in names if get_target(n) is None]
    if unknown:
        console.print(f"[red]Unknown item: {', '.join(unknown)}[/red]")
        console.print("\nAvailable items:")
        for target in SCAN_TARGETS:
            console.print(f"  • {target.name}")
        raise typer.Exit(1)


def _apply_selection(scan: CatalogScan, only: list[str], skip: list[str]) -> None:
    wanted = {n.lower() for n in only}
    skipped = {n.lower() for n in skip}
    for item in scan.items:
        name = item.name.lower()
        item.is_selected = (not wanted or name in wanted) and name not in skipped


@app.command()
def scan() -> None:
    """Scan cleanable locations and large folders."""
    with BackgroundRunner() as runner:
        catalog = CleanableCatalog(runner=runner)
        survey = LargeFolderSurvey(runner=runner)

        catalog_future = catalog.start_scan()
        survey_future = survey.start_scan()
        with console.status("Scanning System Data..."):
            result = catalog_future.result()
            large = survey_future.result()

    show_catalog(result)
    show_large_folders(large)
    if result.items:
        console.print("[dim]Run [bold]maccleaner clean[/bold] to clean these items[/dim]")


@app.command()
def clean(
    only: Optional[list[str]] = typer.Option(
        None, "--only", help="Clean only this item (repeatable)"
    ),
    skip: Optional[list[str]] = typer.Option(
        None, "--skip", help="Leave this item alone (repeatable)"
    ),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompts"),
) -> None:
    """Delete the contents of the cleanable locations."""
    only = only or []
    skip = skip or []
    _check_names(only + skip)

    with BackgroundRunner() as runner:
        catalog = CleanableCatalog(runner=runner)
        engine = DeletionEngine(runner=runner)

        result = _wait(catalog.start_scan, "Scanning System Data...")
        _apply_selection(result, only, skip)

        if not catalog.selected_items:
            console.print("[yellow]Nothing to clean.[/yellow]")
            raise typer.Exit(0)

        show_catalog(result)
        console.print(f"[bold]Selected: {format_size(result.selected_bytes)}[/bold]")

        if not yes and not confirm_action("Permanently delete the selected items?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

        report = _wait(
            lambda: engine.start_clean(catalog.items), "Cleaning Selected Files..."
        )
        show_clean_report(report)

        after = _wait(catalog.start_scan, "Rescanning...")

    console.print(f"Remaining reclaimable: {format_size(after.total_bytes)}")


@docker_app.command("status")
def docker_status() -> None:
    """Show whether Docker is available and how much it holds."""
    with BackgroundRunner() as runner:
        adapter = DockerAdapter(runner=runner)
        _wait(adapter.start_check, "Checking Docker...")
    show_docker_status(adapter.status)


def _require_docker(adapter: DockerAdapter) -> None:
    if not _wait(adapter.start_check, "Checking Docker..."):
        console.print("[red]Docker is not available.[/red]")
        raise typer.Exit(1)


@docker_app.command("volumes")
def docker_volumes() -> None:
    """List unused (dangling) Docker volumes."""
    with BackgroundRunner() as runner:
        adapter = DockerAdapter(runner=runner)
        _require_docker(adapter)
        items = _wait(adapter.start_scan, "Scanning Docker volumes...")
    show_volumes(items)


@docker_app.command("clean-volumes")
def docker_clean_volumes(
    skip: Optional[list[str]] = typer.Option(
        None, "--skip", help="Keep this volume (repeatable)"
    ),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompts"),
) -> None:
    """Remove unused Docker volumes."""
    skipped = set(skip or [])
    with BackgroundRunner() as runner:
        adapter = DockerAdapter(runner=runner)
        _require_docker(adapter)
        items = _wait(adapter.start_scan, "Scanning Docker volumes...")
        for item in items:
            item.is_selected = item.name not in skipped

        show_volumes(items)
        if not any(i.is_selected for i in items):
            raise typer.Exit(0)

        if not yes and not confirm_action("Remove the selected volumes?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

        report = _wait(lambda: adapter.start_delete(items), "Removing volumes...")
    show_command_report(report)


@docker_app.command("prune")
def docker_prune(
    level: CleanupLevel = typer.Option(
        DEFAULT_CLEANUP_LEVEL,
        "--level",
        "-l",
        case_sensitive=False,
        help="unused (safe), all (stops containers) or volumes (DATA LOSS)",
    ),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompts"),
) -> None:
    """Run one of the fixed Docker cleanup levels."""
    prune_level = get_prune_level(level)

    with BackgroundRunner() as runner:
        adapter = DockerAdapter(runner=runner)
        _require_docker(adapter)
        show_prune_level(prune_level)

        if prune_level.is_dangerous:
            console.print("[bold red]⚠️ This removes ALL volumes, including their data.[/bold red]")
        if not yes and not confirm_action("Proceed with Docker cleanup?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

        report = _wait(lambda: adapter.start_prune(level), "Cleaning Docker...")

    show_command_report(report)
    show_docker_status(adapter.status)


if __name__ == "__main__":
    app()
