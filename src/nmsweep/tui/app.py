"""Directory picker for nmsweep."""

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, SelectionList, Static
from textual.widgets.selection_list import Selection

from nmsweep.display import format_age
from nmsweep.models import DirectoryMatch


class MatchPickerApp(App[list[str]]):
    """Multi-select list of stale node_modules directories.

    Exits with the chosen paths in scan order, or an empty list when
    cancelled.
    """

    TITLE = "nmsweep"
    SUB_TITLE = "Select directories to be deleted"

    CSS = """
    #hint {
        padding: 0 1;
        color: $warning;
    }
    SelectionList {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("d", "confirm", "Delete Selected"),
        Binding("a", "select_all", "Select All"),
        Binding("u", "deselect_all", "Deselect All"),
        Binding("q", "cancel", "Quit"),
    ]

    def __init__(self, matches: list[DirectoryMatch]):
        super().__init__()
        self.matches = matches

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("Space to toggle, D to delete the selection.", id="hint")
        yield SelectionList[str](
            *[
                Selection(Text.assemble(m.path, (f"  ({format_age(m.age)} old)", "dim")), m.path)
                for m in self.matches
            ]
        )
        yield Footer()

    def action_select_all(self) -> None:
        self.query_one(SelectionList).select_all()

    def action_deselect_all(self) -> None:
        self.query_one(SelectionList).deselect_all()

    def action_confirm(self) -> None:
        """Finish with the selected paths."""
        chosen = set(self.query_one(SelectionList).selected)
        if not chosen:
            self.query_one("#hint", Static).update("[b]Select at least one.[/b]")
            self.notify("Select at least one.", severity="warning", timeout=3)
            return
        self.exit([m.path for m in self.matches if m.path in chosen])

    def action_cancel(self) -> None:
        self.exit([])


def select_directories(matches: list[DirectoryMatch]) -> list[str]:
    """Run the picker and return the chosen paths.

    Args:
        matches: Directories to offer

    Returns:
        Selected paths in scan order (empty if the user quit)
    """
    app = MatchPickerApp(matches)
    return app.run() or []
