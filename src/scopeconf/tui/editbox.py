"""Single-line edit box widget."""

from __future__ import annotations

from typing import Optional

from .keys import Key, KeyInput, is_printable
from .terminal import Terminal


class EditBox:
    """A bounded, horizontally scrolling line editor.

    The box consumes editing keys and bubbles everything else (Enter,
    Ctrl-C, arrows up/down...) back to its owner.

    Args:
        value: Initial text; the cursor starts at its end.
        max_len: Maximum text length.
        row: Screen row.
        col: Screen column of the field.
        width: Field width in columns.
    """

    def __init__(self, value: str, max_len: int, row: int, col: int, width: int) -> None:
        self._text = value[:max_len]
        self._max_len = max_len
        self._row = row
        self._col = col
        self._width = width
        self._cursor = len(self._text)
        self._first = 0

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def feed(self, key: KeyInput) -> Optional[KeyInput]:
        """Apply one key.

        Returns:
            None if the key was consumed, otherwise the key itself.
        """
        text, cursor = self._text, self._cursor

        if is_printable(key):
            if len(text) >= self._max_len:
                return None
            self._text = text[:cursor] + key + text[cursor:]
            self._cursor += 1
            return None

        match key:
            case Key.BACKSPACE:
                if cursor > 0:
                    self._text = text[: cursor - 1] + text[cursor:]
                    self._cursor -= 1
            case Key.DELETE:
                self._text = text[:cursor] + text[cursor + 1 :]
            case Key.LEFT:
                self._cursor = max(0, cursor - 1)
            case Key.RIGHT:
                self._cursor = min(len(text), cursor + 1)
            case Key.HOME:
                self._cursor = 0
            case Key.END:
                self._cursor = len(text)
            case Key.CTRL_K:
                self._text = text[:cursor]
            case Key.CTRL_U:
                self._text = text[cursor:]
                self._cursor = 0
            case _:
                return key
        return None

    def draw(self, terminal: Terminal) -> None:
        """Draw the visible part of the text and place the cursor."""
        if self._cursor < self._first:
            self._first = self._cursor
        elif self._cursor >= self._first + self._width:
            self._first = self._cursor - self._width + 1

        visible = self._text[self._first : self._first + self._width]
        terminal.addstr(self._row, self._col, visible.ljust(self._width))
        terminal.move(self._row, self._col + self._cursor - self._first)
