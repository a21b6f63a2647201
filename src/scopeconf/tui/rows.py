"""Row enumeration for the settings editor.

The editor shows a scope as a flat list of rows: a link to the parent
scope, links to each child scope, then the settings relevant to the scope.
Rows are derived afresh from (scope, index) on every call, so the list
always reflects the live tree and store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Union

from ..settings import Scope, ScopeTree, SettingDescriptor, SettingRegistry, SettingsStore


@dataclass(frozen=True)
class ParentRow:
    """Link to the parent scope."""

    scope: Scope


@dataclass(frozen=True)
class ChildRow:
    """Link to a child scope."""

    scope: Scope


@dataclass(frozen=True)
class SettingRow:
    """A setting of the current scope."""

    descriptor: SettingDescriptor


@dataclass(frozen=True)
class CountRow:
    """Terminal row: the index ran past the end, ``count`` rows exist."""

    count: int


Row = Union[ParentRow, ChildRow, SettingRow, CountRow]


class RowEnumerator:
    """Canonical row order for a scope.

    Order: the parent link (if the scope has a parent), one link per
    child in child order, one row per relevant registry setting in
    registry order, then one row per ad-hoc value stored at the scope.

    Args:
        tree: Tree used to resolve parent handles.
        registry: Registry supplying setting rows.
        store: Store supplying ad-hoc setting rows; omit to list
            registry settings only.
    """

    def __init__(
        self,
        tree: ScopeTree,
        registry: SettingRegistry,
        store: Optional[SettingsStore] = None,
    ) -> None:
        self._tree = tree
        self._registry = registry
        self._store = store

    def relevant(self, scope: Scope, descriptor: SettingDescriptor) -> bool:
        """True if the setting's tag type matches the scope or any descendant."""
        if descriptor.tag_type == scope.tag_type:
            return True
        return any(self.relevant(child, descriptor) for child in scope.children)

    def _rows(self, scope: Scope) -> Iterator[Row]:
        parent = self._tree.parent_of(scope)
        if parent is not None:
            yield ParentRow(parent)
        for child in scope.children:
            yield ChildRow(child)
        for descriptor in self._registry:
            if self.relevant(scope, descriptor):
                yield SettingRow(descriptor)
        if self._store is not None:
            for descriptor in self._store.extra_descriptors(scope):
                yield SettingRow(descriptor)

    def row(self, scope: Scope, n: int) -> Row:
        """Return the n-th row, or CountRow(total) if n is past the end."""
        count = 0
        for row in self._rows(scope):
            if count == n:
                return row
            count += 1
        return CountRow(count)

    def count(self, scope: Scope) -> int:
        """Total number of rows for a scope."""
        return sum(1 for _ in self._rows(scope))
