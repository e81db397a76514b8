"""Curses screen, key bindings and event source for the recompute loop."""

import curses
import time
from typing import Dict, Optional

from zsnapfree.logging_config import get_logger
from zsnapfree.services.recompute_loop import Action, RecomputeLoop
from zsnapfree.ui.formatting import format_bytes

logger = get_logger(__name__)

KEY_ESCAPE = 27
ESCAPE_DELAY_MS = 25

KEY_BINDINGS: Dict[int, Action] = {
    curses.KEY_HOME: Action.FIRST,
    curses.KEY_END: Action.LAST,
    ord("q"): Action.EXIT,
    KEY_ESCAPE: Action.EXIT,
    ord("k"): Action.PREVIOUS,
    curses.KEY_UP: Action.PREVIOUS,
    ord("j"): Action.NEXT,
    curses.KEY_DOWN: Action.NEXT,
    ord(" "): Action.TOGGLE,
    ord("\n"): Action.TOGGLE,
    ord("\r"): Action.TOGGLE,
    curses.KEY_ENTER: Action.TOGGLE,
}

# Color pair ids
MARKED = 1
HIGHLIGHT = 2
LABEL = 3
PENDING = 4


class CursesEventSource:
    """Reads keys from a curses window and maps them to actions."""

    def __init__(self, window, bindings: Optional[Dict[int, Action]] = None):
        self.window = window
        self.bindings = KEY_BINDINGS if bindings is None else bindings

    def poll(self, timeout: float) -> Optional[Action]:
        """
        Wait up to ``timeout`` seconds for a bound key.

        Unbound keys are discarded without restarting the wait, so they do
        not postpone a pending recompute.
        """
        deadline = time.monotonic() + timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None
            self.window.timeout(max(1, int(remaining * 1000)))
            key = self.window.getch()
            if key == -1:
                return None
            action = self.bindings.get(key)
            if action is not None:
                return action


class CursesRenderer:
    """Draws the snapshot list and the reclaim footer."""

    def __init__(self, window):
        self.window = window
        self.top = 0

    def __call__(self, loop: RecomputeLoop) -> None:
        self.window.erase()
        height, width = self.window.getmaxyx()
        if height < 3 or width < 10:
            self.window.refresh()
            return

        self._put(0, 0, f" Snapshots for {loop.dataset} ", curses.A_BOLD, width)

        rows = height - 2
        selection = loop.selection
        if selection.cursor is not None:
            if selection.cursor < self.top:
                self.top = selection.cursor
            elif selection.cursor >= self.top + rows:
                self.top = selection.cursor - rows + 1

        for row, item in enumerate(selection.items[self.top : self.top + rows]):
            index = self.top + row
            prefix = "+" if item.marked else " "
            attr = curses.color_pair(MARKED) if item.marked else curses.A_NORMAL
            if index == selection.cursor:
                text = f"> {prefix} {item.name}"
                attr = curses.color_pair(HIGHLIGHT) | curses.A_REVERSE
            else:
                text = f"  {prefix} {item.name}"
            self._put(1 + row, 0, text, attr, width)

        footer_y = height - 1
        x = self._put(footer_y, 0, " Destroying ", curses.color_pair(LABEL) | curses.A_BOLD, width)
        x = self._put(footer_y, x, str(len(loop.result.destroys)), curses.A_NORMAL, width)
        x = self._put(
            footer_y, x, " snapshots would reclaim ", curses.color_pair(LABEL) | curses.A_BOLD, width
        )
        x = self._put(footer_y, x, format_bytes(loop.result.bytes) + " ", curses.A_NORMAL, width)
        if loop.dirty:
            self._put(footer_y, x, "<recalculating...> ", curses.color_pair(PENDING), width)

        self.window.refresh()

    def _put(self, y: int, x: int, text: str, attr: int, width: int) -> int:
        # The bottom-right cell cannot be written without curses raising
        available = width - x - 1
        if available <= 0:
            return x
        text = text[:available]
        self.window.addstr(y, x, text, attr)
        return x + len(text)


def _init_colors() -> None:
    if not curses.has_colors():
        return
    curses.start_color()
    curses.use_default_colors()
    curses.init_pair(MARKED, curses.COLOR_YELLOW, -1)
    curses.init_pair(HIGHLIGHT, curses.COLOR_BLUE, -1)
    curses.init_pair(LABEL, curses.COLOR_BLUE, -1)
    curses.init_pair(PENDING, curses.COLOR_YELLOW, -1)


def run_tui(loop: RecomputeLoop) -> None:
    """
    Run the recompute loop inside a full-screen curses session.

    The terminal is restored before returning, including when the loop
    raises.
    """
    def _session(stdscr) -> None:
        curses.set_escdelay(ESCAPE_DELAY_MS)
        try:
            curses.curs_set(0)
        except curses.error:
            logger.debug("Terminal does not support hiding the cursor")
        stdscr.keypad(True)
        _init_colors()
        loop.run(CursesEventSource(stdscr), CursesRenderer(stdscr))

    curses.wrapper(_session)
