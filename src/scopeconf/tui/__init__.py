"""Text-mode settings editor.

Example usage:
    from scopeconf.settings import YamlStorage
    from scopeconf.tui import run_settings_ui

    store = YamlStorage("settings.yaml").load()
    run_settings_ui(store)
"""

from .editbox import EditBox
from .keys import Key, KeyInput, decode_key, is_printable
from .navigator import Navigator, run_settings_ui, settings_ui
from .rows import ChildRow, CountRow, ParentRow, Row, RowEnumerator, SettingRow
from .terminal import ColorPair, CursesTerminal, Terminal
from .widget import EditState, Layout, RowWidget, SettingWidget, render_row
from .window import ScrollWindow

__all__ = [
    # Terminal
    "Terminal",
    "CursesTerminal",
    "ColorPair",
    "Key",
    "KeyInput",
    "decode_key",
    "is_printable",
    "EditBox",
    # Rows
    "Row",
    "ParentRow",
    "ChildRow",
    "SettingRow",
    "CountRow",
    "RowEnumerator",
    # Widgets
    "ScrollWindow",
    "Layout",
    "EditState",
    "RowWidget",
    "SettingWidget",
    "render_row",
    # Session
    "Navigator",
    "settings_ui",
    "run_settings_ui",
]
