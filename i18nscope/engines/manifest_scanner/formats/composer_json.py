"""Format for PHP composer.json manifests (single ``require`` block)."""

from __future__ import annotations

from i18nscope.engines.manifest_scanner.formats._json import block_keys, load_object
from i18nscope.engines.manifest_scanner.models import DependencySet
from i18nscope.engines.manifest_scanner.registry import ManifestFormat, register_format

FORMAT_ID = "composer-json"


def parse(raw: str) -> DependencySet:
    data = load_object(raw, "composer.json")
    return frozenset(block_keys(data, "require", "composer.json"))


register_format(
    ManifestFormat(
        id=FORMAT_ID,
        filename="composer.json",
        parse=parse,
        ignore_dirs=frozenset({"vendor", ".git"}),
    )
)
