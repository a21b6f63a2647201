"""Settings store with per-scope values.

This module provides the SettingsStore class: typed fetch, store and delete
of setting values by (scope, descriptor). Values are kept as wire bytes
keyed by tag, so two descriptors sharing a tag address the same value.
Every call is atomic: a failed store leaves the previous value untouched.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from .registry import SettingRegistry, get_registry
from .schema import SettingDescriptor
from .scope import Scope, ScopeTree

if TYPE_CHECKING:
    from .storage import YamlStorage

logger = logging.getLogger(__name__)

# Size of a value buffer; formatted values hold at most MAX_VALUE_LEN - 1 characters
MAX_VALUE_LEN = 256

# Callback signature: (scope, descriptor, new formatted value or None if deleted)
ChangeListener = Callable[[Scope, SettingDescriptor, Optional[str]], None]


class Lookup(Enum):
    """Where fetch_effective() may look for a value.

    Attributes:
        LOCAL: Only the given scope.
        INHERIT: The given scope, then its descendants depth first.
    """

    LOCAL = "local"
    INHERIT = "inherit"


@dataclass
class _StoredValue:
    descriptor: SettingDescriptor
    raw: bytes


class SettingsStore:
    """Typed values for every scope of a ScopeTree.

    Example:
        store = SettingsStore(tree)
        error = store.store(tree.root, ip_setting, "10.0.0.5")
        if error:
            print(f"Could not set ip: {error}")
        store.fetch(tree.root, ip_setting)  # "10.0.0.5"

        # Listen for changes
        store.on_change(lambda scope, setting, value: print(setting.name, value))
    """

    def __init__(
        self,
        tree: ScopeTree,
        registry: Optional[SettingRegistry] = None,
    ):
        """Initialize the store.

        Args:
            tree: The scope tree whose scopes hold values.
            registry: Registry used to tell registered from ad-hoc settings.
                Defaults to the global registry.
        """
        self._tree = tree
        self._registry = registry if registry is not None else get_registry()

        # scope handle -> {tag: stored value}, in insertion order
        self._values: Dict[int, Dict[int, _StoredValue]] = {}

        self._listeners: List[ChangeListener] = []

        self._storage: Optional["YamlStorage"] = None
        self._auto_save = False

    @property
    def tree(self) -> ScopeTree:
        return self._tree

    @property
    def registry(self) -> SettingRegistry:
        return self._registry

    def attach_storage(self, storage: "YamlStorage", auto_save: bool = True) -> None:
        """Persist through ``storage``; with auto_save, after every change."""
        self._storage = storage
        self._auto_save = auto_save

    # ─────────────────────────────────────────────────────────────────
    # Value Access
    # ─────────────────────────────────────────────────────────────────

    def fetch(self, scope: Scope, descriptor: SettingDescriptor) -> Optional[str]:
        """Fetch the value stored at exactly this scope.

        Returns:
            The formatted value, or None if the scope holds no value.
        """
        return self.fetch_effective(scope, descriptor, Lookup.LOCAL)

    def fetch_effective(
        self,
        scope: Scope,
        descriptor: SettingDescriptor,
        lookup: Lookup = Lookup.INHERIT,
    ) -> Optional[str]:
        """Fetch a value, optionally looking into descendant scopes.

        Args:
            scope: Scope to start from.
            descriptor: Setting to fetch.
            lookup: LOCAL for this scope only, INHERIT to also search
                descendants depth first in child order.

        Returns:
            The formatted value (at most MAX_VALUE_LEN - 1 characters), or
            None if no value was found.
        """
        stored = self._find(scope, descriptor.tag, lookup)
        if stored is None:
            return None
        return descriptor.format(stored.raw)[: MAX_VALUE_LEN - 1]

    def exists(
        self,
        scope: Scope,
        descriptor: SettingDescriptor,
        lookup: Lookup = Lookup.LOCAL,
    ) -> bool:
        """Check whether a value exists (see fetch_effective for lookup)."""
        return self._find(scope, descriptor.tag, lookup) is not None

    def _find(self, scope: Scope, tag: int, lookup: Lookup) -> Optional[_StoredValue]:
        stored = self._values.get(scope.handle, {}).get(tag)
        if stored is not None or lookup is Lookup.LOCAL:
            return stored
        for child in scope.children:
            stored = self._find(child, tag, lookup)
            if stored is not None:
                return stored
        return None

    def store(self, scope: Scope, descriptor: SettingDescriptor, text: str) -> Optional[str]:
        """Parse and store a value.

        An empty string deletes the value. Read-only policy is not enforced
        here; interactive callers check ``descriptor.readonly`` first.

        Args:
            scope: Scope to store into.
            descriptor: Setting to store.
            text: Value text, parsed according to the setting's type.

        Returns:
            None on success, otherwise the reason the value was rejected.
        """
        if not text:
            return self.delete(scope, descriptor)
        if len(text) > MAX_VALUE_LEN - 1:
            return f"value too long (max {MAX_VALUE_LEN - 1} characters)"

        try:
            raw = descriptor.parse(text)
        except ValueError as e:
            logger.debug(f"Rejected {descriptor.name}={text!r}: {e}")
            return str(e)

        # Registered settings are always kept under their registry descriptor
        canonical = self._registry.find_tag(descriptor.tag) or descriptor
        values = self._values.setdefault(scope.handle, {})
        previous = dict(values)
        values[descriptor.tag] = _StoredValue(canonical, raw)

        reason = self._persist()
        if reason:
            self._values[scope.handle] = previous
            return reason

        self._changed(scope, descriptor, descriptor.format(raw))
        return None

    def delete(self, scope: Scope, descriptor: SettingDescriptor) -> Optional[str]:
        """Delete the value stored at exactly this scope, if any.

        Returns:
            None on success, otherwise the reason the change could not be saved.
        """
        values = self._values.get(scope.handle)
        if not values or descriptor.tag not in values:
            return None
        previous = dict(values)
        del values[descriptor.tag]

        reason = self._persist()
        if reason:
            self._values[scope.handle] = previous
            return reason

        self._changed(scope, descriptor, None)
        return None

    def extra_descriptors(self, scope: Scope) -> List[SettingDescriptor]:
        """Descriptors of values stored at this scope under unregistered tags.

        Returns:
            Ad-hoc descriptors in the order their values were first stored.
        """
        return [
            stored.descriptor
            for tag, stored in self._values.get(scope.handle, {}).items()
            if self._registry.find_tag(tag) is None
        ]

    def items(self, scope: Scope) -> List[Tuple[SettingDescriptor, str]]:
        """All values stored at exactly this scope, formatted."""
        return [
            (stored.descriptor, stored.descriptor.format(stored.raw))
            for stored in self._values.get(scope.handle, {}).values()
        ]

    # ─────────────────────────────────────────────────────────────────
    # Events
    # ─────────────────────────────────────────────────────────────────

    def on_change(self, callback: ChangeListener) -> None:
        """Register a callback for value changes.

        Args:
            callback: Function(scope, descriptor, value) called after each
                store or delete; value is None for deletes.
        """
        self._listeners.append(callback)

    def remove_listener(self, callback: ChangeListener) -> None:
        """Remove a change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _changed(self, scope: Scope, descriptor: SettingDescriptor, value: Optional[str]) -> None:
        """Notify listeners of a change that has been kept."""
        logger.info(
            f"{'Set' if value is not None else 'Deleted'} "
            f"{self._tree.full_name(scope) or '<root>'}/{descriptor.name}"
        )

        # Snapshot the list; listeners may unregister themselves
        for listener in list(self._listeners):
            try:
                listener(scope, descriptor, value)
            except Exception as e:
                logger.warning(f"Settings listener error: {e}")

    # ─────────────────────────────────────────────────────────────────
    # Persistence
    # ─────────────────────────────────────────────────────────────────

    def save(self) -> None:
        """Persist all values through the attached storage, if any."""
        if self._storage is None:
            return
        self._storage.save(self)

    def _persist(self) -> Optional[str]:
        """Save after a change when auto-save is on.

        Returns:
            None on success, otherwise the reason the save failed.
        """
        if not self._auto_save:
            return None
        try:
            self.save()
        except OSError as e:
            logger.warning(f"Could not save settings: {e}")
            return f"cannot save: {e}"
        return None
