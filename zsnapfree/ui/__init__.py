"""Terminal front-end for zsnapfree."""

from zsnapfree.ui.formatting import format_bytes
from zsnapfree.ui.tui import CursesEventSource, CursesRenderer, run_tui

__all__ = ["CursesEventSource", "CursesRenderer", "format_bytes", "run_tui"]
