"""PackageDependencyResolver: scan + parse manifests under a root."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import structlog

# Ensure formats are registered before any resolution runs.
import i18nscope.engines.manifest_scanner.formats  # noqa: F401
from i18nscope.core.errors import MalformedManifestError
from i18nscope.engines.manifest_scanner.models import (
    DependencySet,
    ManifestFile,
    PackageDependencies,
)
from i18nscope.engines.manifest_scanner.registry import (
    FORMAT_REGISTRY,
    ManifestFormat,
    scan_manifests,
)

log = structlog.get_logger("i18nscope.engine")


class PackageDependencyResolver:
    """Resolve the declared dependency names visible under a root, per format.

    A ``None`` outcome means "not found": either no manifest of that format
    exists anywhere under the root, or one of them could not be parsed. An
    empty frozenset means manifests were found and declare nothing.
    """

    def __init__(self, formats: Mapping[str, ManifestFormat] | None = None) -> None:
        self._formats = FORMAT_REGISTRY if formats is None else formats

    @property
    def format_ids(self) -> list[str]:
        return list(self._formats)

    def resolve(self, root: Path | str, format_id: str) -> DependencySet | None:
        fmt = self._formats[format_id]
        root = Path(root)
        paths = scan_manifests(root, fmt.filename, fmt.ignore_dirs)

        if not paths:
            log.info("manifest.not_found", filename=fmt.filename, root=str(root))
            return None

        log.info("manifest.found", filename=fmt.filename, root=str(root), count=len(paths))

        names: set[str] = set()
        for path in sorted(paths):
            try:
                manifest = ManifestFile.read(path)
                names |= fmt.parse(manifest.content)
            except (MalformedManifestError, OSError) as exc:
                # One bad manifest invalidates the whole tree for this format.
                log.info(
                    "manifest.parse_error",
                    filename=fmt.filename,
                    root=str(root),
                    path=str(path),
                    error=str(exc),
                )
                return None

        return frozenset(names)

    def resolve_all(self, root: Path | str) -> PackageDependencies:
        """Resolve every registered format under *root*."""
        return {format_id: self.resolve(root, format_id) for format_id in self._formats}


def get_package_dependencies(root: Path | str) -> PackageDependencies:
    """Resolve all registered manifest formats under *root* (no state kept)."""
    return PackageDependencyResolver().resolve_all(root)
