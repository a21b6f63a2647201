"""Settings store package.

This package provides the hierarchical settings store that the editor
browses: a tree of scopes, a process-wide registry of setting descriptors,
and a store holding typed values per scope.

Example usage:
    from scopeconf.settings import (
        TAG_TYPE_NETDEV, ScopeTree, SettingsStore, get_registry, scope_magic,
    )

    registry = get_registry()
    tree = ScopeTree()
    net0 = tree.add("net0", scope_magic(TAG_TYPE_NETDEV))

    store = SettingsStore(tree, registry)
    store.store(net0, registry.find("ip"), "10.0.0.5")
    store.fetch_effective(tree.root, registry.find("ip"))  # "10.0.0.5"
"""

from .builtin import (
    BUILTIN_SETTINGS,
    SCRIPTLET_SETTING,
    TAG_TYPE_GENERIC,
    TAG_TYPE_NAMES,
    TAG_TYPE_NETDEV,
    TAG_TYPE_SMBIOS,
    scope_magic,
)
from .registry import SettingRegistry, get_registry, init_registry, reset_registry
from .schema import (
    SettingDescriptor,
    SettingType,
    dhcp_encap_opt,
    make_tag,
    parse_tag_name,
    tag_readonly,
    tag_type,
)
from .scope import Scope, ScopeTree
from .storage import YamlStorage, resolve_setting
from .store import MAX_VALUE_LEN, Lookup, SettingsStore

__all__ = [
    # Schema types
    "SettingDescriptor",
    "SettingType",
    "make_tag",
    "tag_type",
    "tag_readonly",
    "dhcp_encap_opt",
    "parse_tag_name",
    # Registry
    "SettingRegistry",
    "get_registry",
    "init_registry",
    "reset_registry",
    "BUILTIN_SETTINGS",
    "SCRIPTLET_SETTING",
    "TAG_TYPE_GENERIC",
    "TAG_TYPE_NETDEV",
    "TAG_TYPE_SMBIOS",
    "TAG_TYPE_NAMES",
    "scope_magic",
    # Tree and store
    "Scope",
    "ScopeTree",
    "SettingsStore",
    "Lookup",
    "MAX_VALUE_LEN",
    # Storage
    "YamlStorage",
    "resolve_setting",
]
