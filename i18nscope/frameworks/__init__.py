"""Capability modules ("frameworks") and their registry."""

from i18nscope.frameworks.base import Framework
from i18nscope.frameworks.registry import FrameworkRegistry, create_default_registry

__all__ = ["Framework", "FrameworkRegistry", "create_default_registry"]
