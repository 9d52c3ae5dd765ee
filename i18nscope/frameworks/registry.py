"""Framework registry: ordered catalog and activation queries."""

from __future__ import annotations

import structlog

from i18nscope.core.errors import UnknownFrameworkError
from i18nscope.engines.manifest_scanner.models import PackageDependencies
from i18nscope.frameworks.base import Framework

log = structlog.get_logger("i18nscope.frameworks")


class FrameworkRegistry:
    """Framework registration center. Iteration order is registration order."""

    def __init__(self) -> None:
        self._frameworks: dict[str, Framework] = {}

    def register(self, framework: Framework) -> None:
        self._frameworks[framework.id] = framework

    def get(self, framework_id: str) -> Framework | None:
        return self._frameworks.get(framework_id)

    def require(self, framework_id: str) -> Framework:
        framework = self._frameworks.get(framework_id)
        if framework is None:
            raise UnknownFrameworkError(f"unknown framework '{framework_id}'")
        return framework

    def list_all(self) -> list[Framework]:
        return list(self._frameworks.values())

    def enabled_for(self, packages: PackageDependencies, root: str) -> list[Framework]:
        """Frameworks activated by *packages* at *root*, in registry order."""
        return [f for f in self._frameworks.values() if f.is_enabled(packages, root)]

    def by_ids(self, ids: list[str]) -> list[Framework]:
        """Look up an explicit id list; unknown ids are logged and skipped."""
        frameworks: list[Framework] = []
        unknown: list[str] = []
        for framework_id in ids:
            framework = self._frameworks.get(framework_id)
            if framework is None:
                unknown.append(framework_id)
            elif framework not in frameworks:
                frameworks.append(framework)
        if unknown:
            log.warning("frameworks.unsupported", ids=unknown)
        return frameworks


def create_default_registry() -> FrameworkRegistry:
    """Create a registry holding the built-in framework catalog."""
    from i18nscope.frameworks.builtin import BUILTIN_FRAMEWORKS

    registry = FrameworkRegistry()
    for framework in BUILTIN_FRAMEWORKS:
        registry.register(framework)
    return registry
