"""Configuration surface: pydantic model + mutable store with revision tracking."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from i18nscope.core.errors import ConfigKeyError

EXT_NAMESPACE = "i18nscope"

KeyStyle = Literal["auto", "nested", "flat"]
DirStructure = Literal["auto", "file", "dir"]

DEFAULT_REGEX_KEY = r"[\w\d\. \-\[\]]*?"

# Keys whose change requires the loader to be re-created.
RELOAD_CONFIGS: tuple[str, ...] = (
    "disabled",
    "localesPaths",
    "pathMatcher",
    "enabledFrameworks",
    "enabledParsers",
    "dirStructure",
    "namespace",
    "regex.key",
    "regex.usageMatch",
    "regex.usageMatchAppend",
    "parsers.extendFileExtensions",
)

# Keys whose change only invalidates derived settings.
REFRESH_CONFIGS: tuple[str, ...] = (
    "ignoredLocales",
    "keystyle",
    "extract.autoDetect",
    "autoDetection",
)

# Keys whose change invalidates usage-analysis caches.
USAGE_REFRESH_CONFIGS: tuple[str, ...] = (
    "usage.derivedKeyRules",
    "regex.usageMatch",
    "regex.usageMatchAppend",
)


def affects_configuration(changed_key: str, config_key: str) -> bool:
    """Return True if a change to *changed_key* touches *config_key*.

    Sections match their children in both directions, so ``regex`` affects
    ``regex.key`` and ``regex.key`` affects ``regex``.
    """
    if changed_key == EXT_NAMESPACE:
        return True
    changed_key = strip_namespace(changed_key)
    return (
        changed_key == config_key
        or config_key.startswith(changed_key + ".")
        or changed_key.startswith(config_key + ".")
    )


def strip_namespace(key: str) -> str:
    prefix = EXT_NAMESPACE + "."
    return key[len(prefix):] if key.startswith(prefix) else key


class ExtensionConfig(BaseModel):
    """Immutable snapshot of every user-facing option."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    disabled: bool = False
    enabled_frameworks: list[str] | None = Field(default=None, alias="enabledFrameworks")
    enabled_parsers: list[str] | None = Field(default=None, alias="enabledParsers")
    keystyle: KeyStyle = "auto"
    regex_key: str = Field(default=DEFAULT_REGEX_KEY, alias="regex.key")
    regex_usage_match: list[str] | None = Field(default=None, alias="regex.usageMatch")
    regex_usage_match_append: list[str] = Field(
        default_factory=list, alias="regex.usageMatchAppend"
    )
    path_matcher: str | None = Field(default=None, alias="pathMatcher")
    dir_structure: DirStructure = Field(default="auto", alias="dirStructure")
    locales_paths: list[str] | None = Field(default=None, alias="localesPaths")
    namespace: bool = False
    ignored_locales: list[str] = Field(default_factory=list, alias="ignoredLocales")
    parsers_extend_file_extensions: dict[str, str] = Field(
        default_factory=dict, alias="parsers.extendFileExtensions"
    )
    usage_derived_key_rules: list[str] | None = Field(
        default=None, alias="usage.derivedKeyRules"
    )
    auto_detection: bool = Field(default=True, alias="autoDetection")
    extract_auto_detect: bool = Field(default=False, alias="extract.autoDetect")

    @field_validator("locales_paths", mode="before")
    @classmethod
    def _split_locales_paths(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, list):
            v = [p.strip() for p in v if isinstance(p, str) and p.strip()]
            return v or None
        return v

    @field_validator("enabled_frameworks", "enabled_parsers", mode="before")
    @classmethod
    def _empty_list_is_unset(cls, v: Any) -> Any:
        if isinstance(v, list) and not v:
            return None
        return v


def _field_names() -> dict[str, str]:
    names: dict[str, str] = {}
    for name, info in ExtensionConfig.model_fields.items():
        names[info.alias or name] = name
        names[name] = name
    return names


_FIELDS = _field_names()


def field_for(key: str) -> str:
    """Map a dotted configuration key (or field name) to its model field."""
    key = strip_namespace(key)
    try:
        return _FIELDS[key]
    except KeyError:
        raise ConfigKeyError(f"unknown configuration key '{key}'") from None


class ConfigStore:
    """Holds the current :class:`ExtensionConfig` plus folder-scoped locale paths.

    ``revision`` increases on every effective change, which lets caches
    detect staleness without being told explicitly.
    """

    def __init__(self, config: ExtensionConfig | None = None) -> None:
        self._config = config or ExtensionConfig()
        self._scoped_locales_paths: dict[str, list[str]] = {}
        self.revision = 0

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> ConfigStore:
        data = {strip_namespace(k): v for k, v in values.items()}
        for key in data:
            field_for(key)
        return cls(ExtensionConfig.model_validate(data))

    @classmethod
    def from_file(cls, path: Path) -> ConfigStore:
        """Load options from a JSON settings file.

        Only keys prefixed with the ``i18nscope.`` namespace are read; other
        tools' settings in the same file are ignored.
        """
        raw = json.loads(path.read_text(encoding="utf-8"))
        prefix = EXT_NAMESPACE + "."
        return cls.from_mapping({k: v for k, v in raw.items() if k.startswith(prefix)})

    @property
    def config(self) -> ExtensionConfig:
        return self._config

    def get(self, key: str) -> Any:
        return getattr(self._config, field_for(key))

    def set(self, key: str, value: Any) -> bool:
        """Set *key* to *value*. Returns True if the stored value changed."""
        name = field_for(key)
        data = self._config.model_dump()
        data[name] = value
        updated = ExtensionConfig.model_validate(data)
        if updated == self._config:
            return False
        self._config = updated
        self.revision += 1
        return True

    def set_scoped_locales_paths(self, folder: str, paths: list[str] | None) -> None:
        if paths:
            self._scoped_locales_paths[folder] = list(paths)
        else:
            self._scoped_locales_paths.pop(folder, None)
        self.revision += 1

    def locales_paths_in_scope(self, folder: str | None) -> list[str] | None:
        """Folder-scoped locale paths, falling back to the global value."""
        if folder is not None and folder in self._scoped_locales_paths:
            return self._scoped_locales_paths[folder]
        return self._config.locales_paths
