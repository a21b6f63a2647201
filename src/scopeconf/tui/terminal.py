"""Terminal primitives for the settings editor.

The editor draws through the small ``Terminal`` interface below: cell
addressed text, a handful of named colour pairs, a bold toggle and a
blocking key read. ``CursesTerminal`` implements it on a curses window.
"""

from __future__ import annotations

import curses
import logging
import time
from abc import ABC, abstractmethod
from enum import IntEnum

from .keys import KeyInput, decode_key

logger = logging.getLogger(__name__)


class ColorPair(IntEnum):
    """Named colour pairs (curses pair numbers)."""

    NORMAL = 1
    SELECT = 2
    EDIT = 3
    ALERT = 4


# pair -> (foreground, background)
_PAIR_COLORS = {
    ColorPair.NORMAL: (curses.COLOR_WHITE, curses.COLOR_BLUE),
    ColorPair.SELECT: (curses.COLOR_WHITE, curses.COLOR_RED),
    ColorPair.EDIT: (curses.COLOR_BLACK, curses.COLOR_CYAN),
    ColorPair.ALERT: (curses.COLOR_WHITE, curses.COLOR_RED),
}


class Terminal(ABC):
    """Cell-addressed text terminal."""

    @property
    @abstractmethod
    def lines(self) -> int:
        """Number of screen rows."""

    @property
    @abstractmethod
    def cols(self) -> int:
        """Number of screen columns."""

    @abstractmethod
    def addstr(self, row: int, col: int, text: str) -> None:
        """Write text at (row, col) with the current attributes."""

    @abstractmethod
    def move(self, row: int, col: int) -> None:
        """Move the cursor."""

    @abstractmethod
    def clear_line(self, row: int) -> None:
        """Blank a whole screen row."""

    @abstractmethod
    def erase(self) -> None:
        """Blank the whole screen."""

    @abstractmethod
    def set_color(self, pair: ColorPair) -> None:
        """Select the colour pair used by later writes."""

    @abstractmethod
    def set_bold(self, on: bool) -> None:
        """Toggle the bold attribute for later writes."""

    @abstractmethod
    def refresh(self) -> None:
        """Flush pending output to the screen."""

    @abstractmethod
    def getkey(self) -> KeyInput:
        """Block until a key is pressed."""

    @abstractmethod
    def pause(self, seconds: float) -> None:
        """Hold the current screen for ``seconds``."""

    def print_centered(self, row: int, text: str) -> None:
        """Write text centred on a row."""
        text = text[: self.cols]
        self.addstr(row, max(0, (self.cols - len(text)) // 2), text)


class CursesTerminal(Terminal):
    """Terminal backed by a curses window.

    Args:
        stdscr: The window from ``curses.wrapper``.
        acknowledge: If True, pause() ends early on a key press.
    """

    def __init__(self, stdscr: "curses.window", acknowledge: bool = False) -> None:
        self._stdscr = stdscr
        self._acknowledge = acknowledge
        self._pair = ColorPair.NORMAL
        self._bold = False
        self._colors = False

        # Deliver Ctrl-C/Ctrl-X as keys rather than signals
        curses.raw()
        curses.noecho()
        stdscr.keypad(True)

        if curses.has_colors():
            curses.start_color()
            for pair, (fg, bg) in _PAIR_COLORS.items():
                curses.init_pair(pair, fg, bg)
            self._colors = True
            stdscr.bkgd(" ", curses.color_pair(ColorPair.NORMAL))

    @property
    def lines(self) -> int:
        return self._stdscr.getmaxyx()[0]

    @property
    def cols(self) -> int:
        return self._stdscr.getmaxyx()[1]

    def _attr(self) -> int:
        attr = curses.color_pair(self._pair) if self._colors else 0
        if self._bold:
            attr |= curses.A_BOLD
        return attr

    def addstr(self, row: int, col: int, text: str) -> None:
        if row >= self.lines or col >= self.cols:
            return
        text = text[: self.cols - col]
        try:
            self._stdscr.addstr(row, col, text, self._attr())
        except curses.error:
            # Writing the bottom-right cell moves the cursor off screen
            logger.debug(f"Partial write at {row},{col}")

    def move(self, row: int, col: int) -> None:
        try:
            self._stdscr.move(min(row, self.lines - 1), min(col, self.cols - 1))
        except curses.error:
            logger.debug(f"Cursor move to {row},{col} failed")

    def clear_line(self, row: int) -> None:
        self.move(row, 0)
        self._stdscr.clrtoeol()

    def erase(self) -> None:
        self._stdscr.erase()

    def set_color(self, pair: ColorPair) -> None:
        self._pair = pair

    def set_bold(self, on: bool) -> None:
        self._bold = on

    def refresh(self) -> None:
        self._stdscr.refresh()

    def getkey(self) -> KeyInput:
        self._stdscr.refresh()
        return decode_key(self._stdscr.get_wch())

    def pause(self, seconds: float) -> None:
        self._stdscr.refresh()
        if not self._acknowledge:
            time.sleep(seconds)
            return

        self._stdscr.timeout(int(seconds * 1000))
        try:
            self._stdscr.get_wch()
        except curses.error:
            pass  # timed out without a key press
        finally:
            self._stdscr.timeout(-1)
