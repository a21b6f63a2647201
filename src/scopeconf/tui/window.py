"""Scrolling window over the row list.

The window shows one page of ``page_size`` rows and scrolls by whole
pages. It keeps no record of what is on screen: every repaint redraws
each visible row through the supplied callback.
"""

from __future__ import annotations

import logging
from typing import Callable

from .terminal import Terminal

logger = logging.getLogger(__name__)

ELLIPSIS = "..."

# (row index, screen row) -> None
DrawRow = Callable[[int, int], None]


class ScrollWindow:
    """Page-aligned view of a row list.

    Args:
        terminal: Terminal to draw on.
        page_size: Rows per page.
        top_row: Screen row of the first list row.
        col: Screen column of the list.
        draw_row: Callback drawing one row at a screen row.
    """

    def __init__(
        self,
        terminal: Terminal,
        page_size: int,
        top_row: int,
        col: int,
        draw_row: DrawRow,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._terminal = terminal
        self._page_size = page_size
        self._top_row = top_row
        self._col = col
        self._draw_row = draw_row
        self.first_visible = 0
        self.total_rows = 0

    @property
    def page_size(self) -> int:
        return self._page_size

    def is_visible(self, n: int) -> bool:
        return self.first_visible <= n < self.first_visible + self._page_size

    def screen_row(self, n: int) -> int:
        """Screen row on which row ``n`` is (or would be) drawn."""
        return self._top_row + n - self.first_visible

    def reveal(self, n: int, force: bool = False) -> bool:
        """Scroll so that row ``n`` is visible.

        Args:
            n: Row index to reveal.
            force: Repaint even if ``n`` is already visible.

        Returns:
            True if the window was repainted.
        """
        if self.is_visible(n) and not force:
            return False

        # Jump scroll by whole pages
        while self.first_visible < n:
            self.first_visible += self._page_size
        while self.first_visible > n:
            self.first_visible -= self._page_size

        logger.debug(f"Window at {self.first_visible} revealing row {n}")
        self._draw_markers()
        for i in range(self._page_size):
            index = self.first_visible + i
            if index < self.total_rows:
                self._draw_row(index, self._top_row + i)
            else:
                self._terminal.clear_line(self._top_row + i)
        return True

    def _draw_markers(self) -> None:
        above = ELLIPSIS if self.first_visible > 0 else " " * len(ELLIPSIS)
        below = (
            ELLIPSIS
            if self.first_visible + self._page_size < self.total_rows
            else " " * len(ELLIPSIS)
        )
        self._terminal.addstr(self._top_row - 1, self._col + 1, above)
        self._terminal.addstr(self._top_row + self._page_size, self._col + 1, below)
