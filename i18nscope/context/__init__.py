"""Workspace context: activation, derived settings and loader lifecycle."""

from i18nscope.context.activation import ActivationContext, NearestActivationResolver
from i18nscope.context.controller import ContextController
from i18nscope.context.events import (
    ActiveFileChanged,
    ConfigChanged,
    DocumentClosed,
    DocumentOpened,
    EventEmitter,
    RootChanged,
)
from i18nscope.context.loader import DirectoryLocaleLoader, Loader
from i18nscope.context.settings import DerivedSettingsCache, KeyStyleOption, PathMatcher

__all__ = [
    "ActivationContext",
    "ActiveFileChanged",
    "ConfigChanged",
    "ContextController",
    "DerivedSettingsCache",
    "DirectoryLocaleLoader",
    "DocumentClosed",
    "DocumentOpened",
    "EventEmitter",
    "KeyStyleOption",
    "Loader",
    "NearestActivationResolver",
    "PathMatcher",
    "RootChanged",
]
