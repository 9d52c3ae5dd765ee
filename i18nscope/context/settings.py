"""DerivedSettingsCache: preferences computed from active frameworks + user overrides.

Every derivation is memoised under its own key. The whole cache is dropped
when the active framework set changes or when the backing
:class:`~i18nscope.core.config.ConfigStore` revision moves, so a read never
observes a value computed from an older framework set or older override.
"""

from __future__ import annotations

import os
import re
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog

from i18nscope.core.config import ConfigStore, KeyStyle
from i18nscope.frameworks.base import Framework, get_ext_of_language_id
from i18nscope.parsers import AVAILABLE_PARSERS, DEFAULT_ENABLED_PARSERS, ParserDescriptor
from i18nscope.utils.path_matcher import parse_path_matcher
from i18nscope.utils.regex import normalize_usage_match_regex

log = structlog.get_logger("i18nscope.settings")

T = TypeVar("T")


@dataclass(frozen=True)
class PathMatcher:
    matcher: str
    regex: re.Pattern[str]


@dataclass(frozen=True)
class KeyStyleOption:
    value: KeyStyle
    label: str
    description: str


KEY_STYLE_OPTIONS: tuple[KeyStyleOption, ...] = (
    KeyStyleOption("nested", "Nested", '{ "a": { "b": { "c": "..." } } }'),
    KeyStyleOption("flat", "Flat", '{ "a.b.c": "..." }'),
)

# Shows the options and resolves to the chosen one, or None when dismissed.
KeyStylePrompt = Callable[[Sequence[KeyStyleOption]], Awaitable[KeyStyleOption | None]]


def _uniq(items: Iterable[T]) -> list[T]:
    return list(dict.fromkeys(items))


class DerivedSettingsCache:
    def __init__(
        self,
        config: ConfigStore,
        parsers: Sequence[ParserDescriptor] = AVAILABLE_PARSERS,
    ) -> None:
        self._config = config
        self._parsers = tuple(parsers)
        self._frameworks: tuple[Framework, ...] = ()
        self._cache: dict[str, Any] = {}
        self._revision = config.revision

    # ── invalidation ─────────────────────────────────────────────────────

    @property
    def frameworks(self) -> tuple[Framework, ...]:
        return self._frameworks

    def set_frameworks(self, frameworks: Sequence[Framework]) -> bool:
        """Replace the active framework set. Returns True if it changed."""
        frameworks = tuple(frameworks)
        if frameworks == self._frameworks:
            return False
        self._frameworks = frameworks
        self.reset()
        return True

    def reset(self) -> None:
        self._cache.clear()
        self._revision = self._config.revision

    def _cached(self, key: str, compute: Callable[[], T]) -> T:
        if self._revision != self._config.revision:
            self.reset()
        if key not in self._cache:
            self._cache[key] = compute()
        return self._cache[key]

    # ── usage matching ───────────────────────────────────────────────────

    def usage_match_regex(
        self, language_id: str | None = None, filepath: str | None = None
    ) -> list[re.Pattern[str]]:
        config = self._config.config
        if config.regex_usage_match:
            return self._cached(
                "usage:custom",
                lambda: normalize_usage_match_regex(
                    [*config.regex_usage_match, *config.regex_usage_match_append],
                    config.regex_key,
                ),
            )

        return self._cached(
            f"usage:{language_id}_{filepath}",
            lambda: normalize_usage_match_regex(
                [
                    *(
                        fragment
                        for f in self._frameworks
                        for fragment in f.get_usage_match_regex(language_id, filepath)
                    ),
                    *config.regex_usage_match_append,
                ],
                config.regex_key,
            ),
        )

    @property
    def derived_key_rules(self) -> list[re.Pattern[str]]:
        def _compute() -> list[re.Pattern[str]]:
            rules = self._config.config.usage_derived_key_rules
            if rules is None:
                rules = [r for f in self._frameworks for r in f.derived_key_rules]
            compiled = []
            for rule in _uniq(rules):
                pattern = re.escape(rule).replace(re.escape("{key}"), "(.+)", 1)
                compiled.append(re.compile(f"^{pattern}$"))
            return compiled

        return self._cached("derived_key_rules", _compute)

    # ── key style / namespaces ───────────────────────────────────────────

    async def request_key_style(self, prompt: KeyStylePrompt | None = None) -> KeyStyle:
        """Resolve the key style: override, then framework preference, then ask.

        A dismissed (or unavailable) prompt commits ``nested`` to the
        configuration so later calls do not ask again.
        """
        configured = self._config.config.keystyle
        if configured != "auto":
            return configured

        for f in self._frameworks:
            if f.preferred_key_style != "auto":
                return f.preferred_key_style

        choice = await prompt(KEY_STYLE_OPTIONS) if prompt is not None else None
        style: KeyStyle = choice.value if choice is not None else "nested"
        self._config.set("keystyle", style)
        log.info("settings.keystyle_selected", keystyle=style, prompted=choice is not None)
        return style

    @property
    def namespace_delimiter(self) -> str:
        for f in self._frameworks:
            if f.namespace_delimiter:
                return f.namespace_delimiter
        return "."

    def has_feature_enabled(self, name: str) -> bool:
        return any(name in f.enable_features for f in self._frameworks)

    @property
    def namespace_enabled(self) -> bool:
        return self._config.config.namespace or self.has_feature_enabled("namespace")

    # ── languages ────────────────────────────────────────────────────────

    def is_language_id_supported(self, language_id: str) -> bool:
        return any(language_id in f.language_ids for f in self._frameworks)

    @property
    def support_lang_glob(self) -> str:
        exts = _uniq(
            ext
            for f in self._frameworks
            for language_id in sorted(f.language_ids)
            for ext in get_ext_of_language_id(language_id)
        )
        if not exts:
            return ""
        if len(exts) == 1:
            return f"**/*.{exts[0]}"
        return "**/*.{" + ",".join(exts) + "}"

    @property
    def document_selectors(self) -> list[dict[str, str]]:
        return [
            {"scheme": "file", "language": language_id}
            for f in self._frameworks
            for language_id in sorted(f.language_ids)
        ]

    def extraction_frameworks_by_lang(self, language_id: str) -> list[Framework]:
        return [f for f in self._frameworks if language_id in f.support_auto_extraction]

    # ── parsers & path matching ──────────────────────────────────────────

    @property
    def enabled_parsers(self) -> list[ParserDescriptor]:
        def _compute() -> list[ParserDescriptor]:
            ids = self._config.config.enabled_parsers or [
                parser_id for f in self._frameworks for parser_id in f.enabled_parsers
            ]
            if not ids:
                ids = list(DEFAULT_ENABLED_PARSERS)
            return [p for p in self._parsers if p.id in ids]

        return self._cached("enabled_parsers", _compute)

    @property
    def enabled_parser_exts(self) -> str:
        extend = self._config.config.parsers_extend_file_extensions
        exts: list[str] = []
        for parser in self.enabled_parsers:
            exts.append(parser.supported_exts)
            exts.extend(re.escape(ext) for ext, parser_id in extend.items() if parser_id == parser.id)
        return "|".join(exts)

    def matched_parser(self, ext: str) -> ParserDescriptor | None:
        """Parser for a file extension (``.json``) or a file name (``en.json``)."""
        if not ext.startswith(".") and "." in ext:
            ext = os.path.splitext(ext)[1]

        parser_id = self._config.config.parsers_extend_file_extensions.get(ext.lstrip("."))
        if parser_id:
            return next((p for p in self.enabled_parsers if p.id == parser_id), None)

        return next((p for p in self.enabled_parsers if p.supports(ext)), None)

    @property
    def dir_structure(self) -> str | None:
        configured = self._config.config.dir_structure
        if configured != "auto":
            return configured
        preferred = None
        for f in self._frameworks:
            if f.preferred_dir_structure:
                preferred = f.preferred_dir_structure
        return preferred

    def path_matchers(self, dir_structure: str | None = None) -> list[PathMatcher]:
        if dir_structure is None:
            dir_structure = self.dir_structure

        def _compute() -> list[PathMatcher]:
            override = self._config.config.path_matcher
            if override:
                rules = [override]
            else:
                namespace = self.namespace_enabled
                rules = [
                    rule
                    for f in self._frameworks
                    for rule in f.path_matchers(dir_structure, namespace)
                ]
            exts = self.enabled_parser_exts
            return [PathMatcher(rule, parse_path_matcher(rule, exts)) for rule in _uniq(rules)]

        return self._cached(f"path_matchers:{dir_structure}", _compute)

    # ── locales ──────────────────────────────────────────────────────────

    def locales_paths(self, workspace_folder: str | None = None) -> list[str] | None:
        """Configured locale paths, else framework hints, else None."""
        configured = self._config.locales_paths_in_scope(workspace_folder)
        if configured:
            return list(configured)
        hinted = _uniq(p for f in self._frameworks for p in f.preferred_locale_paths)
        return hinted or None

    def visible_locales(self, locales: Iterable[str]) -> list[str]:
        ignored = set(self._config.config.ignored_locales)
        return [locale for locale in locales if locale not in ignored]
