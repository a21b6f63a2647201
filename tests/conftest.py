"""Shared fixtures: a recording terminal and small settings trees."""

from typing import Iterable, List, Optional

import pytest

from scopeconf.settings import (
    TAG_TYPE_GENERIC,
    TAG_TYPE_NETDEV,
    ScopeTree,
    SettingDescriptor,
    SettingRegistry,
    SettingsStore,
    SettingType,
    YamlStorage,
    make_tag,
    reset_registry,
    scope_magic,
)
from scopeconf.tui import ColorPair, KeyInput, Terminal


class ScriptExhausted(Exception):
    """Raised when a session asks for more keys than the test scripted."""


class FakeTerminal(Terminal):
    """Terminal that records every cell instead of drawing.

    Keys are served from a script; running past its end raises
    ScriptExhausted so a stuck session fails instead of hanging.
    """

    def __init__(self, keys: Iterable[KeyInput] = (), lines: int = 24, cols: int = 80):
        self._lines = lines
        self._cols = cols
        self.keys: List[KeyInput] = list(keys)
        self.cells = [[" "] * cols for _ in range(lines)]
        self.bold = [[False] * cols for _ in range(lines)]
        self.pairs = [[ColorPair.NORMAL] * cols for _ in range(lines)]
        self.cursor = (0, 0)
        self.pair = ColorPair.NORMAL
        self.is_bold = False
        self.alerts: List[str] = []
        self.pauses: List[float] = []
        self.refreshes = 0

    @property
    def lines(self) -> int:
        return self._lines

    @property
    def cols(self) -> int:
        return self._cols

    def addstr(self, row: int, col: int, text: str) -> None:
        if not 0 <= row < self._lines:
            return
        if self.pair is ColorPair.ALERT:
            self.alerts.append(text)
        for offset, char in enumerate(text):
            if col + offset >= self._cols:
                break
            self.cells[row][col + offset] = char
            self.bold[row][col + offset] = self.is_bold
            self.pairs[row][col + offset] = self.pair
        self.cursor = (row, min(col + len(text), self._cols - 1))

    def move(self, row: int, col: int) -> None:
        self.cursor = (row, col)

    def clear_line(self, row: int) -> None:
        if 0 <= row < self._lines:
            self.cells[row] = [" "] * self._cols
            self.bold[row] = [False] * self._cols
            self.pairs[row] = [self.pair] * self._cols

    def erase(self) -> None:
        for row in range(self._lines):
            self.clear_line(row)

    def set_color(self, pair: ColorPair) -> None:
        self.pair = pair

    def set_bold(self, on: bool) -> None:
        self.is_bold = on

    def refresh(self) -> None:
        self.refreshes += 1

    def getkey(self) -> KeyInput:
        if not self.keys:
            raise ScriptExhausted("no scripted keys left")
        return self.keys.pop(0)

    def pause(self, seconds: float) -> None:
        self.pauses.append(seconds)

    def row_text(self, row: int) -> str:
        return "".join(self.cells[row])

    def row_bold(self, row: int, col: int) -> bool:
        return self.bold[row][col]


@pytest.fixture
def make_terminal():
    """Factory for FakeTerminal instances."""

    def _make(keys: Iterable[KeyInput] = (), lines: int = 24, cols: int = 80) -> FakeTerminal:
        return FakeTerminal(keys, lines, cols)

    return _make


@pytest.fixture(autouse=True)
def _fresh_global_registry():
    """Keep the process-wide registry from leaking between tests."""
    reset_registry()
    yield
    reset_registry()


HOSTNAME = SettingDescriptor("hostname", "Host name", make_tag(12))
IP = SettingDescriptor("ip", "IPv4 address", make_tag(50), SettingType.IPV4)
MAC = SettingDescriptor(
    "mac", "MAC address", make_tag(1, TAG_TYPE_NETDEV, readonly=True), SettingType.HEX
)


@pytest.fixture
def small_registry():
    """hostname and ip (generic), mac (netdev, read-only)."""
    registry = SettingRegistry([HOSTNAME, IP, MAC])
    registry.freeze()
    return registry


@pytest.fixture
def net_tree():
    """root (generic) -> net0 (netdev) -> dhcp (generic)."""
    tree = ScopeTree(root_magic=scope_magic(TAG_TYPE_GENERIC))
    net0 = tree.add("net0", scope_magic(TAG_TYPE_NETDEV))
    tree.add("dhcp", scope_magic(TAG_TYPE_GENERIC), parent=net0)
    return tree


@pytest.fixture
def net_store(net_tree, small_registry):
    """Empty store over net_tree using small_registry."""
    return SettingsStore(net_tree, small_registry)


@pytest.fixture
def unwritable_storage(tmp_path):
    """Storage whose file sits under a regular file, so every save fails."""
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    return YamlStorage(blocker / "settings.yaml")


def find_row(terminal: FakeTerminal, text: str) -> Optional[int]:
    """Index of the first screen row containing text, if any."""
    for row in range(terminal.lines):
        if text in terminal.row_text(row):
            return row
    return None
