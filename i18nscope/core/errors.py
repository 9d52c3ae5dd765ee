"""Exception taxonomy for i18nscope."""

from __future__ import annotations


class I18nScopeError(Exception):
    """Base exception for all i18nscope errors."""


class MalformedManifestError(I18nScopeError):
    """Raised when a manifest file is not valid structured data for its format."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed manifest '{path}': {reason}")


class UnknownFrameworkError(I18nScopeError):
    """Raised when a framework id is not present in the registry."""


class ConfigKeyError(I18nScopeError):
    """Raised when a configuration key is not recognised."""
