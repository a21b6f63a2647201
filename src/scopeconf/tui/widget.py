"""Row view and edit state for the settings editor.

A ``RowWidget`` is built fresh each time a row is selected or drawn: it
loads the row's value, renders it, and runs the per-row edit session
(load, edit, commit, discard). ``SettingWidget`` holds the state of a
whole scope: the row count, the scroll window and the selected row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..settings import MAX_VALUE_LEN, Lookup, Scope, SettingsStore
from .editbox import EditBox
from .keys import KeyInput
from .rows import ChildRow, CountRow, ParentRow, Row, RowEnumerator, SettingRow
from .terminal import Terminal
from .window import ScrollWindow

logger = logging.getLogger(__name__)

ROOT_LABEL = "<root>"
EMPTY_VALUE = "<not specified>"
NAME_FILLER = "."


@dataclass(frozen=True)
class Layout:
    """Screen layout of the editor.

    Attributes:
        page_size: Rows shown per page.
        title_row: Row of the title line.
        list_row: Row of the first list entry.
        list_col: Column of the list.
        name_width: Width of the name field.
        value_width: Width of the value field.
    """

    page_size: int = 16
    title_row: int = 1
    list_row: int = 3
    list_col: int = 1
    name_width: int = 15
    value_width: int = 60

    @property
    def info_row(self) -> int:
        return self.list_row + self.page_size + 1

    @property
    def alert_row(self) -> int:
        return self.info_row

    @property
    def comment_row(self) -> int:
        return self.info_row + 1

    @property
    def instruction_row(self) -> int:
        return self.info_row + 2

    @property
    def value_col(self) -> int:
        return self.list_col + 1 + self.name_width + 1


def render_row(name: str, value: str, layout: Layout) -> str:
    """Lay out one list line: padded name field, then padded value field."""
    name_field = name[: layout.name_width].ljust(layout.name_width, NAME_FILLER)
    value_field = (value or EMPTY_VALUE)[: layout.value_width].ljust(layout.value_width)
    return f" {name_field} {value_field} "


class EditState(Enum):
    """Edit session state of a row."""

    VIEWING = "viewing"
    EDITING = "editing"


class RowWidget:
    """View of one row, with its edit session.

    Args:
        store: Store to load values from and save them to.
        scope: Scope being displayed.
        row: The row shown.
        screen_row: Screen row of this line.
        layout: Screen layout.
    """

    def __init__(
        self,
        store: SettingsStore,
        scope: Scope,
        row: Row,
        screen_row: int,
        layout: Layout,
    ) -> None:
        self._store = store
        self._scope = scope
        self.row = row
        self.screen_row = screen_row
        self._layout = layout
        self.state = EditState.VIEWING
        self._editbox = self._new_editbox("")
        self.load()

    def _new_editbox(self, value: str) -> EditBox:
        return EditBox(
            value,
            MAX_VALUE_LEN - 1,
            self.screen_row,
            self._layout.value_col,
            self._layout.value_width,
        )

    @property
    def editing(self) -> bool:
        return self.state is EditState.EDITING

    @property
    def value(self) -> str:
        """Current buffer contents."""
        return self._editbox.text

    @property
    def name(self) -> str:
        match self.row:
            case ParentRow():
                return "parent"
            case ChildRow():
                return "child"
            case SettingRow(descriptor=descriptor):
                return descriptor.name
            case CountRow():
                return ""

    @property
    def editable(self) -> bool:
        """Only writable settings may be edited or deleted."""
        match self.row:
            case SettingRow(descriptor=descriptor):
                return not descriptor.readonly
            case _:
                return False

    @property
    def target(self) -> Optional[Scope]:
        """Scope a Parent/Child row links to."""
        match self.row:
            case ParentRow(scope=scope) | ChildRow(scope=scope):
                return scope
            case _:
                return None

    @property
    def is_local(self) -> bool:
        """True for scope links and for settings whose value is set at this scope."""
        match self.row:
            case ParentRow() | ChildRow():
                return True
            case SettingRow(descriptor=descriptor):
                return self._store.exists(self._scope, descriptor, Lookup.LOCAL)
            case CountRow():
                return False

    @property
    def is_inherited(self) -> bool:
        """True when the shown value comes from a descendant scope only."""
        match self.row:
            case SettingRow(descriptor=descriptor):
                return self._store.exists(
                    self._scope, descriptor, Lookup.INHERIT
                ) and not self._store.exists(self._scope, descriptor, Lookup.LOCAL)
            case _:
                return False

    def load(self) -> None:
        """(Re)load the value from the store and return to viewing."""
        self.state = EditState.VIEWING
        match self.row:
            case ParentRow(scope=scope):
                value = scope.name or ROOT_LABEL
            case ChildRow(scope=scope):
                value = scope.name
            case SettingRow(descriptor=descriptor):
                value = self._store.fetch_effective(self._scope, descriptor, Lookup.INHERIT) or ""
            case CountRow():
                value = ""
        self._editbox = self._new_editbox(value)

    def save(self) -> Optional[str]:
        """Store the buffer.

        Returns:
            None on success, otherwise the reason the store refused it.
        """
        match self.row:
            case SettingRow(descriptor=descriptor):
                return self._store.store(self._scope, descriptor, self._editbox.text)
            case _:
                raise TypeError(f"Cannot save a {type(self.row).__name__}")

    def edit(self, key: KeyInput) -> Optional[KeyInput]:
        """Enter (or stay in) editing and feed one key to the edit box.

        Returns:
            None if the key was consumed, otherwise the bubbled key.
        """
        self.state = EditState.EDITING
        return self._editbox.feed(key)

    def draw(self, terminal: Terminal) -> None:
        """Draw the line with the terminal's current colour pair."""
        if isinstance(self.row, CountRow):
            # Placeholder past the end of the list
            terminal.clear_line(self.screen_row)
            return
        layout = self._layout
        bold = self.is_local
        if bold:
            terminal.set_bold(True)
        terminal.addstr(self.screen_row, layout.list_col, render_row(self.name, self.value, layout))
        if bold:
            terminal.set_bold(False)

        value_len = len(self.value) if self.value else len(EMPTY_VALUE)
        terminal.move(self.screen_row, layout.value_col + min(value_len, layout.value_width))
        if self.editing:
            self._editbox.draw(terminal)


class SettingWidget:
    """Selection and scroll state of the editor for one scope.

    Args:
        terminal: Terminal to draw on.
        store: Settings store.
        enumerator: Row enumerator.
        scope: Scope being displayed.
        layout: Screen layout.
    """

    def __init__(
        self,
        terminal: Terminal,
        store: SettingsStore,
        enumerator: RowEnumerator,
        scope: Scope,
        layout: Layout,
    ) -> None:
        self._terminal = terminal
        self._store = store
        self._enumerator = enumerator
        self.scope = scope
        self._layout = layout
        self.window = ScrollWindow(
            terminal, layout.page_size, layout.list_row, layout.list_col, self._draw_row
        )
        self.total_rows = 0
        self.index = 0
        self.recount()
        self.reveal(0, force=True)

    @property
    def first_visible(self) -> int:
        return self.window.first_visible

    def recount(self) -> int:
        """Re-derive the row count from the enumerator."""
        self.total_rows = self._enumerator.count(self.scope)
        self.window.total_rows = self.total_rows
        return self.total_rows

    def _view(self, index: int) -> RowWidget:
        return RowWidget(
            self._store,
            self.scope,
            self._enumerator.row(self.scope, index),
            self.window.screen_row(index),
            self._layout,
        )

    def _draw_row(self, index: int, screen_row: int) -> None:
        self._view(index).draw(self._terminal)

    def select(self, index: int) -> RowWidget:
        """Make ``index`` the current row with a freshly loaded view."""
        self.index = index
        self.current = self._view(index)
        return self.current

    def reveal(self, index: int, force: bool = False) -> RowWidget:
        """Scroll to ``index`` (repainting if needed) and select it."""
        self.window.reveal(index, force=force)
        return self.select(index)
