"""NearestActivationResolver: closest ancestor folder whose manifests activate frameworks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import structlog

from i18nscope.engines.manifest_scanner.resolver import PackageDependencyResolver
from i18nscope.frameworks.base import Framework
from i18nscope.frameworks.registry import FrameworkRegistry

log = structlog.get_logger("i18nscope.context")


@dataclass(frozen=True)
class ActivationContext:
    workspace_root: str | None
    active_file_dir: str | None
    frameworks: tuple[Framework, ...] = ()
    activation_folder: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.frameworks


def ancestor_folders(root: str, current: str) -> list[str] | None:
    """Folders from *current* up to and including *root*, closest first.

    Returns None when *current* is not *root* or one of its descendants.
    """
    root_path = Path(os.path.normpath(root))
    current_path = Path(os.path.normpath(current))
    try:
        rel = current_path.relative_to(root_path)
    except ValueError:
        return None

    parts = rel.parts
    folders = [str(root_path.joinpath(*parts[:i])) for i in range(len(parts), 0, -1)]
    folders.append(str(root_path))
    return folders


class NearestActivationResolver:
    """Walk from the active file's folder towards the workspace root.

    The first folder whose declared dependencies activate at least one
    framework wins, so a nested project always beats the root.
    """

    def __init__(
        self,
        registry: FrameworkRegistry,
        resolver: PackageDependencyResolver | None = None,
    ) -> None:
        self._registry = registry
        self._resolver = resolver or PackageDependencyResolver()

    def resolve(self, workspace_root: str, active_file_dir: str) -> ActivationContext:
        empty = ActivationContext(workspace_root, active_file_dir)

        folders = ancestor_folders(workspace_root, active_file_dir)
        if folders is None:
            log.debug(
                "activation.out_of_scope",
                workspace_root=workspace_root,
                active_file_dir=active_file_dir,
            )
            return empty

        for folder in folders:
            packages = self._resolver.resolve_all(folder)
            frameworks = self._registry.enabled_for(packages, folder)
            if frameworks:
                log.info(
                    "activation.found",
                    folder=folder,
                    frameworks=[f.id for f in frameworks],
                )
                return ActivationContext(
                    workspace_root=workspace_root,
                    active_file_dir=active_file_dir,
                    frameworks=tuple(frameworks),
                    activation_folder=folder,
                )

        log.info("activation.none", workspace_root=workspace_root)
        return empty
