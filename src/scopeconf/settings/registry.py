"""Process-wide setting registry.

The registry is an ordered table of setting descriptors. Registry order is
display order: the editor lists relevant settings in the order they were
registered. The global instance is initialised once, before any editing
session, and is read-only afterwards.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .schema import SettingDescriptor

logger = logging.getLogger(__name__)


class SettingRegistry:
    """Ordered table of setting descriptors.

    Example:
        registry = SettingRegistry()
        registry.register(SettingDescriptor("ip", "IPv4 address", 50, SettingType.IPV4))
        registry.freeze()

        for descriptor in registry:
            ...
    """

    def __init__(self, descriptors: Iterable[SettingDescriptor] = ()):
        self._descriptors: List[SettingDescriptor] = []
        self._by_name: Dict[str, SettingDescriptor] = {}
        self._by_tag: Dict[int, SettingDescriptor] = {}
        self._frozen = False
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: SettingDescriptor) -> None:
        """Append a descriptor to the table.

        Args:
            descriptor: The descriptor to add.

        Raises:
            RuntimeError: If the registry has been frozen.
            ValueError: If the name or tag is already registered.
        """
        if self._frozen:
            raise RuntimeError("Setting registry is frozen")
        if descriptor.name in self._by_name:
            raise ValueError(f"Setting '{descriptor.name}' already registered")
        if descriptor.tag in self._by_tag:
            other = self._by_tag[descriptor.tag]
            raise ValueError(
                f"Setting '{descriptor.name}' reuses tag {descriptor.tag:#x} of '{other.name}'"
            )

        self._descriptors.append(descriptor)
        self._by_name[descriptor.name] = descriptor
        self._by_tag[descriptor.tag] = descriptor

    def freeze(self) -> None:
        """Refuse further registrations."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def find(self, name: str) -> Optional[SettingDescriptor]:
        """Look up a descriptor by name."""
        return self._by_name.get(name)

    def find_tag(self, tag: int) -> Optional[SettingDescriptor]:
        """Look up a descriptor by wire tag."""
        return self._by_tag.get(tag)

    def __iter__(self) -> Iterator[SettingDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, descriptor: object) -> bool:
        if not isinstance(descriptor, SettingDescriptor):
            return False
        return self._by_tag.get(descriptor.tag) == descriptor


# Global instance, set once at startup
_global_registry: Optional[SettingRegistry] = None


def get_registry() -> SettingRegistry:
    """Get the global registry, initialising it with the built-ins if needed.

    Returns:
        The frozen global SettingRegistry.
    """
    if _global_registry is None:
        return init_registry()
    return _global_registry


def init_registry(
    descriptors: Optional[Iterable[SettingDescriptor]] = None,
) -> SettingRegistry:
    """Initialise the global registry.

    Args:
        descriptors: Descriptors to register, in display order. Defaults to
            the built-in settings.

    Returns:
        The initialised, frozen SettingRegistry.
    """
    global _global_registry
    if descriptors is None:
        from .builtin import BUILTIN_SETTINGS

        descriptors = BUILTIN_SETTINGS

    registry = SettingRegistry(descriptors)
    registry.freeze()
    _global_registry = registry
    logger.debug(f"Initialised setting registry with {len(registry)} settings")
    return registry


def reset_registry() -> None:
    """Drop the global registry (for testing)."""
    global _global_registry
    _global_registry = None
