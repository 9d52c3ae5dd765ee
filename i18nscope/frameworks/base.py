"""Framework contract: activation predicate plus a bundle of preferences."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from i18nscope.core.config import DirStructure, KeyStyle
from i18nscope.engines.manifest_scanner.models import PackageDependencies

# language id -> source file extensions
LANGUAGE_EXTS: dict[str, tuple[str, ...]] = {
    "javascript": ("js",),
    "typescript": ("ts",),
    "javascriptreact": ("jsx",),
    "typescriptreact": ("tsx",),
    "vue": ("vue",),
    "svelte": ("svelte",),
    "html": ("html",),
    "php": ("php",),
    "blade": ("blade.php",),
}


def get_ext_of_language_id(language_id: str) -> tuple[str, ...]:
    return LANGUAGE_EXTS.get(language_id, (language_id,))


@dataclass(frozen=True, eq=False)
class Framework:
    """A named bundle of activation rules and preferences for one ecosystem.

    Activation is decided by ``detector`` when given, otherwise by
    ``detection``: a mapping of manifest format id to dependency names, any
    one of which being declared activates the framework.
    """

    id: str
    display: str
    language_ids: frozenset[str] = frozenset()
    detection: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    detector: Callable[[PackageDependencies, str], bool] | None = None
    preferred_key_style: KeyStyle = "auto"
    preferred_dir_structure: DirStructure | None = None
    preferred_locale_paths: tuple[str, ...] = ()
    namespace_delimiter: str | None = None
    usage_match_regex: tuple[str, ...] = ()
    usage_match_regex_by_language: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    path_matcher_rules: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    enabled_parsers: tuple[str, ...] = ()
    enable_features: frozenset[str] = frozenset()
    derived_key_rules: tuple[str, ...] = ()
    support_auto_extraction: frozenset[str] = frozenset()

    def is_enabled(self, packages: PackageDependencies, root: str) -> bool:
        if self.detector is not None:
            return self.detector(packages, root)
        for format_id, names in self.detection.items():
            declared = packages.get(format_id)
            if declared and any(name in declared for name in names):
                return True
        return False

    def get_usage_match_regex(
        self, language_id: str | None = None, filepath: str | None = None
    ) -> tuple[str, ...]:
        if language_id is not None and language_id in self.usage_match_regex_by_language:
            return self.usage_match_regex_by_language[language_id]
        return self.usage_match_regex

    def path_matchers(self, dir_structure: str | None, namespace: bool = False) -> tuple[str, ...]:
        if dir_structure in self.path_matcher_rules:
            return self.path_matcher_rules[dir_structure]
        if dir_structure == "file":
            return ("{locale}.{ext}",)
        if namespace:
            return ("{locale}/**/{namespace}.{ext}",)
        return ("{locale}/**/*.{ext}",)
