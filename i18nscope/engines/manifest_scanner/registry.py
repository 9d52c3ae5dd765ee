"""Format registry: discover manifest files and match them to parse functions."""

from __future__ import annotations

import os
from collections.abc import Callable, Collection
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from i18nscope.engines.manifest_scanner.models import DependencySet

log = structlog.get_logger("i18nscope.engine")


@dataclass(frozen=True)
class ManifestFormat:
    """A manifest variant: which file to look for, where not to look, how to read it.

    ``parse`` receives the raw file text and returns the declared dependency
    names. It raises :class:`~i18nscope.core.errors.MalformedManifestError`
    when the text is not valid for the format.
    """

    id: str
    filename: str
    parse: Callable[[str], DependencySet]
    ignore_dirs: frozenset[str] = field(default_factory=lambda: frozenset({".git"}))


FORMAT_REGISTRY: dict[str, ManifestFormat] = {}


def register_format(fmt: ManifestFormat) -> None:
    """Register a manifest format by its id."""
    FORMAT_REGISTRY[fmt.id] = fmt


def scan_manifests(
    root: Path,
    filename: str,
    ignore_dirs: Collection[str] = (),
) -> set[Path]:
    """Collect absolute paths of every *filename* under *root*.

    ``root/filename`` is always checked. Subdirectories named in
    *ignore_dirs* are skipped together with their whole subtree. Symlinked
    directories are not entered.
    """
    root = Path(root).absolute()
    ignored = frozenset(ignore_dirs)
    found: set[Path] = set()

    root_manifest = root / filename
    if _is_file(root_manifest):
        found.add(root_manifest)

    pending = [root]
    while pending:
        directory = pending.pop()
        candidate = directory / filename
        if _is_file(candidate):
            found.add(candidate)

        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as exc:
            log.debug("manifest.dir_unreadable", directory=str(directory), error=str(exc))
            continue

        for entry in entries:
            if entry.name in ignored:
                continue
            if entry.is_dir(follow_symlinks=False):
                pending.append(Path(entry.path))

    return found


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError as exc:
        log.debug("manifest.dir_unreadable", directory=str(path.parent), error=str(exc))
        return False
