"""Error types for scopeconf.

Store writes report failures as reason strings (see
``SettingsStore.store``); these exceptions cover lookups and
configuration problems that the caller cannot recover from locally.
"""

from typing import Optional


class ScopeConfError(Exception):
    """Base exception for all scopeconf errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnknownScopeError(ScopeConfError):
    """Raised when a scope path does not name a scope in the tree."""

    def __init__(self, path: str, available: Optional[list] = None):
        message = f"Scope not found: {path or '<root>'}"
        details = {"path": path}
        if available:
            details["available"] = available
            message += f". Available: {', '.join(available[:5])}"
            if len(available) > 5:
                message += f" (+{len(available) - 5} more)"
        super().__init__(message, details)
        self.path = path


class UnknownSettingError(ScopeConfError):
    """Raised when a setting name is neither registered nor a valid tag."""

    def __init__(self, name: str, reason: str = ""):
        message = f"Unknown setting: {name}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, {"name": name})
        self.name = name


class ConfigError(ScopeConfError):
    """Raised when the application configuration cannot be loaded."""
