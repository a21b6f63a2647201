"""YAML persistence for the scope tree and its values.

Example file structure:
    root:
      type: generic
      values:
        hostname: "bootbox"
      children:
        - name: net0
          type: netdev
          values:
            mac: "52:54:00:12:34:56"
          children:
            - name: dhcp
              type: generic
              values:
                ip: "10.0.0.5"
                175.3:hex: "0a:00"

Quote hex and MAC values: YAML reads an unquoted ``52:54:00:12:34:56`` as
a base-60 integer. Unquoted numbers are only accepted for integer settings.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..errors import UnknownSettingError
from .builtin import TAG_TYPE_NAMES, scope_magic
from .registry import SettingRegistry, get_registry
from .schema import SettingDescriptor, SettingType, parse_tag_name, tag_type
from .scope import Scope, ScopeTree
from .store import SettingsStore

logger = logging.getLogger(__name__)

_TAG_TYPE_LABELS = {number: name for name, number in TAG_TYPE_NAMES.items()}

_INTEGER_TYPES = {
    SettingType.INT8,
    SettingType.INT16,
    SettingType.INT32,
    SettingType.UINT8,
    SettingType.UINT16,
    SettingType.UINT32,
}


def resolve_setting(registry: SettingRegistry, name: str) -> SettingDescriptor:
    """Resolve a setting name to a registry descriptor or an ad-hoc one.

    Args:
        registry: Registry to search first.
        name: Registered name or ``tag[.tag]:type`` syntax.

    Returns:
        The descriptor.

    Raises:
        UnknownSettingError: If the name is neither registered nor valid
            tag syntax.
    """
    descriptor = registry.find(name)
    if descriptor is not None:
        return descriptor
    return parse_tag_name(name)


class YamlStorage:
    """YAML file storage for a scope tree and its values."""

    def __init__(self, path: Path):
        """Initialize YAML storage.

        Args:
            path: Path to the YAML file.
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Get the storage file path."""
        return self._path

    def load(
        self,
        registry: Optional[SettingRegistry] = None,
        auto_save: bool = True,
    ) -> SettingsStore:
        """Load the tree and its values into a new store.

        A missing or unreadable file yields an empty root scope.

        Args:
            registry: Registry for resolving setting names. Defaults to
                the global registry.
            auto_save: Whether the returned store saves after each change.

        Returns:
            A SettingsStore attached to this storage.
        """
        registry = registry if registry is not None else get_registry()
        data: Dict[str, Any] = {}

        if self._path.exists():
            try:
                with open(self._path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                logger.warning(f"Failed to load settings from {self._path}: {e}")
                data = {}

        root_doc = data.get("root") if isinstance(data, dict) else None
        root_doc = root_doc if isinstance(root_doc, dict) else {}

        tree = ScopeTree(root_magic=self._parse_magic(root_doc.get("type")))
        store = SettingsStore(tree, registry)
        self._load_scope(store, tree.root, root_doc)

        store.attach_storage(self, auto_save=auto_save)
        logger.debug(f"Loaded {len(tree)} scopes from {self._path}")
        return store

    def _load_scope(self, store: SettingsStore, scope: Scope, doc: Dict[str, Any]) -> None:
        values = doc.get("values") or {}
        if not isinstance(values, dict):
            logger.warning(
                f"Ignoring values of {scope.name or '<root>'} in {self._path}: not a mapping"
            )
            values = {}

        for name, value in values.items():
            try:
                descriptor = resolve_setting(store.registry, str(name))
            except UnknownSettingError as e:
                logger.warning(f"Skipping value in {self._path}: {e}")
                continue
            text = self._value_text(descriptor, value)
            if text is None:
                logger.warning(
                    f"Skipping {name} in {self._path}: {value!r} is not a string, quote it"
                )
                continue
            error = store.store(scope, descriptor, text)
            if error:
                logger.warning(f"Skipping {name} in {self._path}: {error}")

        children = doc.get("children") or []
        if not isinstance(children, list):
            logger.warning(
                f"Ignoring children of {scope.name or '<root>'} in {self._path}: not a list"
            )
            children = []

        for child_doc in children:
            if not isinstance(child_doc, dict):
                continue
            try:
                child = store.tree.add(
                    str(child_doc.get("name", "")),
                    self._parse_magic(child_doc.get("type")),
                    parent=scope,
                )
            except ValueError as e:
                logger.warning(f"Skipping scope in {self._path}: {e}")
                continue
            self._load_scope(store, child, child_doc)

    @staticmethod
    def _value_text(descriptor: SettingDescriptor, value: Any) -> Optional[str]:
        """Text to store for a YAML value, or None if it cannot be trusted."""
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        is_int = isinstance(value, int) and not isinstance(value, bool)
        if is_int and descriptor.type in _INTEGER_TYPES:
            return str(value)
        return None

    @staticmethod
    def _parse_magic(value: Any) -> int:
        """Accept a tag type name ("netdev") or number."""
        if value is None:
            return scope_magic(0)
        if isinstance(value, str) and value in TAG_TYPE_NAMES:
            return scope_magic(TAG_TYPE_NAMES[value])
        try:
            return scope_magic(int(value))
        except (TypeError, ValueError):
            logger.warning(f"Unknown scope type {value!r}, using generic")
            return scope_magic(0)

    def save(self, store: SettingsStore) -> None:
        """Save the whole tree and its values.

        Args:
            store: The store to persist.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)

        data = {"root": self._dump_scope(store, store.tree.root)}
        with open(self._path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        logger.debug(f"Saved settings to {self._path}")

    def _dump_scope(self, store: SettingsStore, scope: Scope) -> Dict[str, Any]:
        doc: Dict[str, Any] = {}
        if not scope.is_root:
            doc["name"] = scope.name
        doc["type"] = _TAG_TYPE_LABELS.get(tag_type(scope.tag_magic), tag_type(scope.tag_magic))

        values = {descriptor.name: value for descriptor, value in store.items(scope)}
        if values:
            doc["values"] = values
        if scope.children:
            doc["children"] = [self._dump_scope(store, child) for child in scope.children]
        return doc
