"""Interactive settings navigator.

The navigator shows one scope at a time as a scrolling list and
dispatches keys to move, edit, delete or follow a scope link. Following
a link ends ``main_loop`` with the target scope; ``settings_ui`` then
re-enters the loop with it, so no navigation history is kept beyond the
tree's own parent links.
"""

from __future__ import annotations

import curses
import logging
from typing import TYPE_CHECKING, Optional

from ..settings import Scope, SettingsStore
from .keys import Key, KeyInput, is_printable
from .rows import RowEnumerator, SettingRow
from .terminal import ColorPair, CursesTerminal, Terminal
from .widget import Layout, RowWidget, SettingWidget

if TYPE_CHECKING:
    from ..config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT_NAME = "scopeconf"
DEFAULT_ALERT_SECONDS = 2.0

INSTRUCTION_PAD = "     "
EDIT_INSTRUCTIONS = f"Enter - accept changes{INSTRUCTION_PAD}Ctrl-C - discard changes"
VIEW_INSTRUCTIONS = f"Ctrl-D - delete setting{INSTRUCTION_PAD}Ctrl-X - exit configuration utility"
INHERITED_COMMENT = "[inherited from child scope]"
READ_ONLY_ALERT = " read only "


class Navigator:
    """Key-driven browser and editor over a settings store.

    Args:
        terminal: Terminal to draw on and read keys from.
        store: Settings store being edited.
        layout: Screen layout.
        product_name: Prefix of the title line.
        alert_seconds: How long alerts stay on screen.
    """

    def __init__(
        self,
        terminal: Terminal,
        store: SettingsStore,
        layout: Optional[Layout] = None,
        product_name: str = DEFAULT_PRODUCT_NAME,
        alert_seconds: float = DEFAULT_ALERT_SECONDS,
    ) -> None:
        self._terminal = terminal
        self._store = store
        self._layout = layout or Layout()
        self._product_name = product_name
        self._alert_seconds = alert_seconds
        self._enumerator = RowEnumerator(store.tree, store.registry, store)

    @property
    def layout(self) -> Layout:
        return self._layout

    # ─────────────────────────────────────────────────────────────────
    # Message rows
    # ─────────────────────────────────────────────────────────────────

    def _msg(self, row: int, text: str) -> None:
        self._terminal.clear_line(row)
        self._terminal.print_centered(row, text)

    def alert(self, text: str) -> None:
        """Show a transient message on the alert row."""
        logger.info(f"Alert: {text.strip()}")
        terminal = self._terminal
        terminal.clear_line(self._layout.alert_row)
        terminal.set_color(ColorPair.ALERT)
        terminal.print_centered(self._layout.alert_row, text)
        terminal.pause(self._alert_seconds)
        terminal.set_color(ColorPair.NORMAL)
        terminal.clear_line(self._layout.alert_row)

    def draw_title(self, scope: Scope) -> None:
        name = self._store.tree.full_name(scope)
        title = " ".join(
            part for part in (self._product_name, name, "option configuration console") if part
        )
        self._terminal.set_bold(True)
        self._msg(self._layout.title_row, title)
        self._terminal.set_bold(False)

    def draw_info(self, current: RowWidget) -> None:
        match current.row:
            case SettingRow(descriptor=descriptor):
                text = f"{descriptor.name} - {descriptor.description}"
            case _ if current.target is not None:
                text = f"Enter - visit {current.name}"
            case _:
                text = ""
        self._terminal.set_bold(True)
        self._msg(self._layout.info_row, text)
        self._terminal.set_bold(False)

    def draw_instructions(self, editing: bool) -> None:
        self._msg(
            self._layout.instruction_row,
            EDIT_INSTRUCTIONS if editing else VIEW_INSTRUCTIONS,
        )

    def draw_comment(self, current: RowWidget) -> None:
        self._msg(self._layout.comment_row, INHERITED_COMMENT if current.is_inherited else "")

    # ─────────────────────────────────────────────────────────────────
    # Key handling
    # ─────────────────────────────────────────────────────────────────

    def _move(self, widget: SettingWidget, index: int) -> None:
        # Unselect the old row before revealing the new one
        self._terminal.set_color(ColorPair.NORMAL)
        widget.current.draw(self._terminal)
        widget.reveal(index)

    def _reload_rows(self, widget: SettingWidget) -> None:
        widget.recount()
        index = min(widget.index, max(widget.total_rows - 1, 0))
        widget.reveal(index, force=True)

    def _commit(self, widget: SettingWidget) -> None:
        current = widget.current
        reason = current.save()
        if reason:
            self.alert(f" Could not set {current.name}: {reason} ")
        current.load()

        # Clearing an ad-hoc setting removes its row
        if widget.total_rows != self._enumerator.count(widget.scope):
            self._reload_rows(widget)

    def _handle_edit_key(self, widget: SettingWidget, key: KeyInput) -> None:
        match widget.current.edit(key):
            case Key.ENTER:
                self._commit(widget)
            case Key.CTRL_C:
                widget.current.load()
            case _:
                pass

    def _handle_view_key(self, widget: SettingWidget, key: KeyInput) -> Optional[Scope]:
        """Handle one key while viewing.

        Returns:
            The scope to visit next, or ``widget.scope`` to stay.
        """
        current = widget.current
        match key:
            case Key.DOWN:
                if widget.index + 1 < widget.total_rows:
                    self._move(widget, widget.index + 1)
            case Key.UP:
                if widget.index > 0:
                    self._move(widget, widget.index - 1)
            case Key.CTRL_D:
                match current.row:
                    case SettingRow(descriptor=descriptor) if current.editable:
                        reason = self._store.delete(widget.scope, descriptor)
                        if reason:
                            self.alert(f" Could not delete {current.name}: {reason} ")
                        self._reload_rows(widget)
                    case _:
                        self.alert(READ_ONLY_ALERT)
            case Key.CTRL_X:
                return None
            case Key.ENTER if current.target is not None:
                return current.target
            case _ if key is Key.ENTER or is_printable(key):
                if current.editable:
                    current.edit(key)
                else:
                    self.alert(READ_ONLY_ALERT)
            case _:
                logger.debug(f"Ignored key {key!r}")
        return widget.scope

    def main_loop(self, scope: Scope) -> Optional[Scope]:
        """Browse one scope until the operator leaves it.

        Args:
            scope: Scope to show.

        Returns:
            The scope to show next, or None when the operator exits.
        """
        logger.info(f"Showing scope {self._store.tree.full_name(scope) or '<root>'}")
        terminal = self._terminal

        self.draw_title(scope)
        terminal.set_color(ColorPair.NORMAL)
        widget = SettingWidget(terminal, self._store, self._enumerator, scope, self._layout)

        while True:
            current = widget.current
            self.draw_info(current)
            self.draw_instructions(current.editing)
            self.draw_comment(current)

            terminal.set_color(ColorPair.EDIT if current.editing else ColorPair.SELECT)
            current.draw(terminal)
            terminal.set_color(ColorPair.NORMAL)

            key = terminal.getkey()
            if current.editing:
                self._handle_edit_key(widget, key)
                continue

            next_scope = self._handle_view_key(widget, key)
            if next_scope is not scope:
                return next_scope


def settings_ui(
    terminal: Terminal,
    store: SettingsStore,
    scope: Optional[Scope] = None,
    layout: Optional[Layout] = None,
    product_name: str = DEFAULT_PRODUCT_NAME,
    alert_seconds: float = DEFAULT_ALERT_SECONDS,
) -> None:
    """Run an editor session until the operator exits.

    Args:
        terminal: Terminal to run on.
        store: Settings store to edit.
        scope: Scope to start at (default: the root).
        layout: Screen layout.
        product_name: Prefix of the title line.
        alert_seconds: How long alerts stay on screen.
    """
    navigator = Navigator(terminal, store, layout, product_name, alert_seconds)
    terminal.set_color(ColorPair.NORMAL)
    terminal.erase()

    current: Optional[Scope] = scope if scope is not None else store.tree.root
    while current is not None:
        current = navigator.main_loop(current)

    terminal.erase()
    terminal.refresh()
    logger.info("Settings session ended")


def run_settings_ui(
    store: SettingsStore,
    scope: Optional[Scope] = None,
    config: Optional["AppConfig"] = None,
) -> None:
    """Run an editor session on the real terminal through curses."""
    if config is None:
        from ..config import AppConfig

        config = AppConfig()

    layout = Layout(page_size=config.page_size)

    def _session(stdscr: "curses.window") -> None:
        terminal = CursesTerminal(stdscr, acknowledge=config.alert_acknowledge)
        settings_ui(
            terminal,
            store,
            scope,
            layout=layout,
            product_name=config.product_name,
            alert_seconds=config.alert_seconds,
        )

    curses.wrapper(_session)
