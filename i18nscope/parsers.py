"""Locale-file parser descriptors.

Only the identity and file-extension coverage of each parser is modelled
here; reading the files themselves is the loader's concern.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ParserDescriptor:
    id: str
    supported_exts: str  # regex alternation, e.g. "ya?ml"
    _pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_pattern", re.compile(rf"^\.?(?:{self.supported_exts})$", re.IGNORECASE)
        )

    def supports(self, ext: str) -> bool:
        return bool(self._pattern.match(ext))


AVAILABLE_PARSERS: tuple[ParserDescriptor, ...] = (
    ParserDescriptor("json", "json"),
    ParserDescriptor("yaml", "ya?ml"),
    ParserDescriptor("json5", "json5"),
    ParserDescriptor("js", "js"),
    ParserDescriptor("ts", "ts"),
    ParserDescriptor("po", "pot?"),
    ParserDescriptor("php", "php"),
    ParserDescriptor("properties", "properties"),
    ParserDescriptor("ftl", "ftl"),
)

DEFAULT_ENABLED_PARSERS: tuple[str, ...] = ("json", "yaml", "json5", "po", "properties", "ftl")
