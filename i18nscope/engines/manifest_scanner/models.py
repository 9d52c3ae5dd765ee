"""Data models for the manifest scanner engine."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DependencySet = frozenset[str]

# format id -> declared dependency names, or None when no manifest of that
# format exists under the root (or it could not be parsed).
PackageDependencies = dict[str, DependencySet | None]


@dataclass(frozen=True)
class ManifestFile:
    """A manifest discovered on disk, read once per scan."""

    path: Path
    content: str

    @classmethod
    def read(cls, path: Path) -> ManifestFile:
        return cls(path=path, content=path.read_text(encoding="utf-8", errors="replace"))
