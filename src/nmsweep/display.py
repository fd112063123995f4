"""Rich terminal display for nmsweep."""

from datetime import datetime

from rich.console import Console
from rich.table import Table

from nmsweep.config import AgeCapError, validate_age_cap
from nmsweep.models import DeleteResult, DirectoryMatch

console = Console()

AGE_QUESTION = "How old node_modules do you want to delete? (months)"


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable string (decimal units)."""
    if size_bytes >= 1000**3:
        return f"{size_bytes / (1000**3):.1f} GB"
    elif size_bytes >= 1000**2:
        return f"{size_bytes / (1000**2):.1f} MB"
    elif size_bytes >= 1000:
        return f"{size_bytes / 1000:.1f} KB"
    else:
        return f"{size_bytes} B"


def format_age(timestamp: datetime, now: datetime | None = None) -> str:
    """Relative age without suffix, e.g. '3 months' or 'a day'."""
    now = now or datetime.now()
    seconds = max((now - timestamp).total_seconds(), 0)
    days = seconds / 86400

    if days < 1:
        return "less than a day"
    elif days < 1.5:
        return "a day"
    elif days < 26:
        return f"{round(days)} days"
    elif days < 45:
        return "a month"
    elif days < 320:
        return f"{max(round(days / 30.4375), 2)} months"
    elif days < 548:
        return "a year"
    else:
        return f"{round(days / 365.25)} years"


def show_matches(matches: list[DirectoryMatch], show_sizes: bool = False) -> None:
    """Display found directories."""
    table = Table(title="Stale node_modules", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Path")
    table.add_column("Last modified", justify="right")
    if show_sizes:
        table.add_column("Size", justify="right")

    for i, match in enumerate(matches, start=1):
        row = [str(i), match.path, f"{format_age(match.age)} ago"]
        if show_sizes:
            row.append(format_size(match.size_bytes or 0))
        table.add_row(*row)

    console.print(table)
    if show_sizes:
        total = sum(m.size_bytes or 0 for m in matches)
        console.print(f"\n[bold]Total: {format_size(total)}[/bold]")


def show_nothing_found() -> None:
    """Zero matches is an outcome, not an error."""
    console.print("[cyan]i[/cyan] Oops! Your node_modules are too young to be deleted.")


def show_delete_result(result: DeleteResult, dry_run: bool = False) -> None:
    """Display the outcome of a delete run."""
    count = result.deleted_count
    noun = "directory" if count == 1 else "directories"

    if dry_run:
        console.print(f"[yellow]DRY RUN[/yellow] - would delete {count} {noun}")
    else:
        console.print(f"[green]✓[/green] Deleted {count} {noun} successfully. ({result.files_deleted} files)")

    for path in result.failed:
        console.print(f"  [red]✗[/red] Could not delete {path}")

    verb = "would be" if dry_run else "now"
    console.print(
        f"\n[bold magenta]{format_size(result.total_bytes_reclaimed)}[/bold magenta] {verb} free on your disk"
    )


def show_error(message: str) -> None:
    """Display an operational error."""
    console.print(f"[red]Error: {message}[/red]")


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message)


def prompt_age_cap() -> int:
    """Ask for the age cap until a valid one is entered."""
    from rich.prompt import Prompt

    while True:
        answer = Prompt.ask(AGE_QUESTION, console=console)
        try:
            return validate_age_cap(answer)
        except AgeCapError as e:
            console.print(f"[red]{e}[/red]")
