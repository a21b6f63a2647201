"""Scope tree.

A scope is a named node holding settings and child scopes. The tree owns
every scope in a flat table; a scope refers to its parent only by handle
(its index in that table), so children never own their parent.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from ..errors import UnknownScopeError
from .schema import tag_type

logger = logging.getLogger(__name__)

# Separator between scope names in a full path ("net0.dhcp")
PATH_SEPARATOR = "."


@dataclass(eq=False)
class Scope:
    """A node in the settings tree.

    Attributes:
        handle: Index of this scope in its tree's table.
        name: Scope name; empty for the root.
        tag_magic: Type discriminator; its tag type selects relevant settings.
        parent: Handle of the parent scope, or None for the root.
        children: Child scopes in display order.
    """

    handle: int
    name: str
    tag_magic: int
    parent: Optional[int] = None
    children: List["Scope"] = field(default_factory=list, repr=False)

    @property
    def tag_type(self) -> int:
        return tag_type(self.tag_magic)

    @property
    def is_root(self) -> bool:
        return self.parent is None


class ScopeTree:
    """Owning table of scopes, rooted at an unnamed root scope.

    Example:
        tree = ScopeTree()
        net0 = tree.add("net0", scope_magic(TAG_TYPE_NETDEV))
        dhcp = tree.add("dhcp", scope_magic(TAG_TYPE_GENERIC), parent=net0)
        tree.full_name(dhcp)  # "net0.dhcp"
    """

    def __init__(self, root_magic: int = 0):
        self._scopes: List[Scope] = []
        self._root = self._new("", root_magic, None)

    @property
    def root(self) -> Scope:
        return self._root

    def _new(self, name: str, tag_magic: int, parent: Optional[int]) -> Scope:
        scope = Scope(handle=len(self._scopes), name=name, tag_magic=tag_magic, parent=parent)
        self._scopes.append(scope)
        return scope

    def add(self, name: str, tag_magic: int, parent: Optional[Scope] = None) -> Scope:
        """Create a child scope.

        Args:
            name: Scope name, unique among its siblings.
            tag_magic: Type discriminator of the new scope.
            parent: Parent scope; defaults to the root.

        Returns:
            The new scope.

        Raises:
            ValueError: If the name is empty, contains a separator, or
                duplicates a sibling.
        """
        parent = parent or self._root
        if not name or PATH_SEPARATOR in name or "/" in name:
            raise ValueError(f"Invalid scope name: {name!r}")
        if any(child.name == name for child in parent.children):
            raise ValueError(f"Scope '{name}' already exists under '{self.full_name(parent)}'")

        scope = self._new(name, tag_magic, parent.handle)
        parent.children.append(scope)
        logger.debug(f"Added scope {self.full_name(scope)}")
        return scope

    def get(self, handle: int) -> Scope:
        """Resolve a handle to its scope."""
        return self._scopes[handle]

    def parent_of(self, scope: Scope) -> Optional[Scope]:
        """Resolve a scope's parent handle, or None for the root."""
        if scope.parent is None:
            return None
        return self._scopes[scope.parent]

    def full_name(self, scope: Scope) -> str:
        """Dotted path from the root (the root itself is "")."""
        names = []
        current: Optional[Scope] = scope
        while current is not None and not current.is_root:
            names.append(current.name)
            current = self.parent_of(current)
        return PATH_SEPARATOR.join(reversed(names))

    def find(self, path: str) -> Scope:
        """Resolve a dotted path to a scope.

        Args:
            path: Dotted path; "" names the root.

        Returns:
            The matching scope.

        Raises:
            UnknownScopeError: If any path component does not exist.
        """
        scope = self._root
        if not path:
            return scope
        for part in path.split(PATH_SEPARATOR):
            match = next((child for child in scope.children if child.name == part), None)
            if match is None:
                raise UnknownScopeError(path, [self.full_name(s) for s in self.walk() if not s.is_root])
            scope = match
        return scope

    def walk(self, scope: Optional[Scope] = None) -> Iterator[Scope]:
        """Yield a scope and its descendants, depth first in child order."""
        scope = scope or self._root
        yield scope
        for child in scope.children:
            yield from self.walk(child)

    def __iter__(self) -> Iterator[Scope]:
        return self.walk()

    def __len__(self) -> int:
        return len(self._scopes)
