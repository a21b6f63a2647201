"""Symbolic key codes.

Terminals deliver either a ``Key`` for navigation/control keys or a
one-character string for printable input.
"""

from __future__ import annotations

import curses
from enum import Enum
from typing import Union


class Key(str, Enum):
    """Navigation and control keys."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    ENTER = "enter"
    BACKSPACE = "backspace"
    DELETE = "delete"
    CTRL_C = "ctrl-c"
    CTRL_D = "ctrl-d"
    CTRL_K = "ctrl-k"
    CTRL_U = "ctrl-u"
    CTRL_X = "ctrl-x"
    ESCAPE = "escape"
    UNKNOWN = "unknown"


KeyInput = Union[Key, str]


# Control characters delivered as strings by get_wch()
_CHAR_KEYS = {
    "\n": Key.ENTER,
    "\r": Key.ENTER,
    "\x03": Key.CTRL_C,
    "\x04": Key.CTRL_D,
    "\x0b": Key.CTRL_K,
    "\x15": Key.CTRL_U,
    "\x18": Key.CTRL_X,
    "\x1b": Key.ESCAPE,
    "\x08": Key.BACKSPACE,
    "\x7f": Key.BACKSPACE,
    "\x01": Key.HOME,
    "\x05": Key.END,
}

# curses KEY_* codes delivered as ints
_CURSES_KEYS = {
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_LEFT: Key.LEFT,
    curses.KEY_RIGHT: Key.RIGHT,
    curses.KEY_HOME: Key.HOME,
    curses.KEY_END: Key.END,
    curses.KEY_ENTER: Key.ENTER,
    curses.KEY_BACKSPACE: Key.BACKSPACE,
    curses.KEY_DC: Key.DELETE,
}


def decode_key(raw: Union[int, str]) -> KeyInput:
    """Translate a ``get_wch()`` result into a symbolic key.

    Args:
        raw: An int key code or a character.

    Returns:
        A Key, or the character itself when it is printable.
    """
    if isinstance(raw, int):
        return _CURSES_KEYS.get(raw, Key.UNKNOWN)
    if raw in _CHAR_KEYS:
        return _CHAR_KEYS[raw]
    if len(raw) == 1 and raw.isprintable():
        return raw
    return Key.UNKNOWN


def is_printable(key: KeyInput) -> bool:
    """True for a single printable character (not a Key)."""
    return not isinstance(key, Key) and len(key) == 1 and key.isprintable()
