"""Interactive directory picker."""

from nmsweep.tui.app import MatchPickerApp, select_directories

__all__ = ["MatchPickerApp", "select_directories"]
