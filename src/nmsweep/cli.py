"""CLI interface for nmsweep."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from nmsweep import __version__
from nmsweep.config import CONFIG_ENV_VAR, Settings, config_path, load_settings, save_settings
from nmsweep.display import (
    confirm_action,
    console,
    prompt_age_cap,
    show_delete_result,
    show_error,
    show_matches,
    show_nothing_found,
)
from nmsweep.models import (
    MAX_DEPTH_LIMIT,
    DeleteRequest,
    DeleteResult,
    DirectoryMatch,
    ScanRequest,
)
from nmsweep.scanner import expand_path
from nmsweep.workers import WorkerError, run_delete, run_scan

log = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="nmsweep",
    help="Find and delete node_modules directories you haven't touched in months",
    add_completion=False,
)


def setup_logging(verbose: bool) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"nmsweep version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging."),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        envvar=CONFIG_ENV_VAR,
        help="Config file (default: ~/.nmsweep/config.json).",
    ),
) -> None:
    """nmsweep - delete stale node_modules directories."""
    setup_logging(verbose)
    ctx.obj = {
        "config_path": config_path(config_file),
        "settings": load_settings(config_file),
    }

    # If no command specified, run the interactive cleanup
    if ctx.invoked_subcommand is None:
        ctx.invoke(clean, ctx=ctx, roots=None, age=None, select_all=False, yes=False, dry_run=False)


def _resolve_age(age: Optional[int], settings: Settings) -> int:
    if age is not None:
        return age
    if settings.age_cap_months is not None:
        return settings.age_cap_months
    return prompt_age_cap()


def _scan(
    roots: list[str],
    age_cap: int,
    settings: Settings,
    quiet: bool = False,
    with_sizes: bool = False,
) -> list[DirectoryMatch]:
    """Run the scan worker behind a spinner."""
    request = ScanRequest(
        roots=[str(expand_path(r)) for r in roots],
        age_cap_months=age_cap,
        max_depth=settings.max_depth,
        with_sizes=with_sizes,
    )

    with console.status("Indexing the disk...") as status:

        def on_message(text: str) -> None:
            status.update(f"Indexing the disk... [dim]{escape(text)}[/dim]")

        try:
            matches = run_scan(request, on_message=on_message)
        except WorkerError as e:
            show_error(str(e))
            raise typer.Exit(1)

    if not quiet:
        console.print("[green]✓[/green] Indexing file system.")
    return matches


def _delete(paths: list[str], dry_run: bool) -> DeleteResult:
    """Run the delete worker behind a spinner."""
    request = DeleteRequest(paths=paths, dry_run=dry_run)

    with console.status("Deleting directories...") as status:

        def on_message(text: str) -> None:
            status.update(f"Deleting directories... [dim]{escape(text)}[/dim]")

        try:
            return run_delete(request, on_message=on_message)
        except WorkerError as e:
            show_error(str(e))
            raise typer.Exit(1)


@app.command()
def clean(
    ctx: typer.Context,
    roots: Optional[list[str]] = typer.Argument(
        None, help="Directories to search (default: from config, else current directory)"
    ),
    age: Optional[int] = typer.Option(
        None, "--age", "-a", min=1, help="Minimum age in months since last modification"
    ),
    select_all: bool = typer.Option(
        False, "--all", help="Delete every match without opening the picker"
    ),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate without deleting"),
) -> None:
    """Find stale node_modules, pick some and delete them (default)."""
    settings: Settings = ctx.obj["settings"]
    age_cap = _resolve_age(age, settings)
    log.debug("Cleaning with age cap of %s months", age_cap)

    matches = _scan(roots or settings.roots, age_cap, settings)
    if not matches:
        show_nothing_found()
        raise typer.Exit(0)

    if select_all:
        selected = [m.path for m in matches]
    else:
        from nmsweep.tui import select_directories

        selected = select_directories(matches)

    if not selected:
        console.print("[yellow]Nothing selected[/yellow]")
        raise typer.Exit(0)

    if not yes and not dry_run:
        if not confirm_action(f"Confirm deleting {len(selected)} directories?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    result = _delete(selected, dry_run)
    show_delete_result(result, dry_run=dry_run)


@app.command()
def scan(
    ctx: typer.Context,
    roots: Optional[list[str]] = typer.Argument(
        None, help="Directories to search (default: from config, else current directory)"
    ),
    age: Optional[int] = typer.Option(
        None, "--age", "-a", min=1, help="Minimum age in months since last modification"
    ),
    sizes: bool = typer.Option(False, "--sizes", help="Also measure each directory (slower)"),
    as_json: bool = typer.Option(False, "--json", help="Print matches as JSON"),
) -> None:
    """List stale node_modules without deleting anything."""
    settings: Settings = ctx.obj["settings"]
    age_cap = _resolve_age(age, settings)

    matches = _scan(roots or settings.roots, age_cap, settings, quiet=as_json, with_sizes=sizes)

    if as_json:
        items = [m.model_dump(mode="json", exclude_none=True) for m in matches]
        typer.echo(json.dumps(items, indent=2))
        return

    if not matches:
        show_nothing_found()
        return

    show_matches(matches, show_sizes=sizes)


@app.command()
def config(
    ctx: typer.Context,
    age: Optional[int] = typer.Option(None, "--age", "-a", min=1, help="Default age cap in months"),
    root: Optional[list[str]] = typer.Option(
        None, "--root", "-r", help="Default directory to search (repeatable)"
    ),
    max_depth: Optional[int] = typer.Option(
        None,
        "--max-depth",
        min=1,
        max=MAX_DEPTH_LIMIT,
        help="Maximum directory depth below each root",
    ),
) -> None:
    """Show configuration, or update it with the given options."""
    settings: Settings = ctx.obj["settings"]
    path: Path = ctx.obj["config_path"]

    updates = {}
    if age is not None:
        updates["age_cap_months"] = age
    if root:
        updates["roots"] = root
    if max_depth is not None:
        updates["max_depth"] = max_depth

    if updates:
        settings = settings.model_copy(update=updates)
        if not save_settings(settings, path):
            show_error(f"Could not write {path}")
            raise typer.Exit(1)
        console.print(f"[green]✓[/green] Saved {escape(str(path))}")

    console.print(f"[bold]Config file:[/bold] {escape(str(path))}")
    age_text = f"{settings.age_cap_months} months" if settings.age_cap_months else "ask every time"
    console.print(f"  Age cap:   {age_text}")
    console.print(f"  Roots:     {escape(', '.join(settings.roots))}")
    console.print(f"  Max depth: {settings.max_depth}")


if __name__ == "__main__":
    app()
