"""Format for npm package.json manifests."""

from __future__ import annotations

from i18nscope.engines.manifest_scanner.formats._json import block_keys, load_object
from i18nscope.engines.manifest_scanner.models import DependencySet
from i18nscope.engines.manifest_scanner.registry import ManifestFormat, register_format

FORMAT_ID = "package-json"

_BLOCKS = ("dependencies", "devDependencies", "peerDependencies")


def parse(raw: str) -> DependencySet:
    data = load_object(raw, "package.json")
    names: set[str] = set()
    for block in _BLOCKS:
        names |= block_keys(data, block, "package.json")
    return frozenset(names)


register_format(
    ManifestFormat(
        id=FORMAT_ID,
        filename="package.json",
        parse=parse,
        ignore_dirs=frozenset({"node_modules", ".git"}),
    )
)
