"""Manifest scanner engine: discover declared dependencies from package manifests."""

from i18nscope.engines.manifest_scanner.models import (
    DependencySet,
    ManifestFile,
    PackageDependencies,
)
from i18nscope.engines.manifest_scanner.registry import (
    FORMAT_REGISTRY,
    ManifestFormat,
    register_format,
    scan_manifests,
)
from i18nscope.engines.manifest_scanner.resolver import (
    PackageDependencyResolver,
    get_package_dependencies,
)

__all__ = [
    "FORMAT_REGISTRY",
    "DependencySet",
    "ManifestFile",
    "ManifestFormat",
    "PackageDependencies",
    "PackageDependencyResolver",
    "get_package_dependencies",
    "register_format",
    "scan_manifests",
]
