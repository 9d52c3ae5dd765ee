"""Per-root loader resources."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from i18nscope.context.events import EventEmitter
from i18nscope.context.settings import PathMatcher

log = structlog.get_logger("i18nscope.loader")


class Loader(ABC):
    """Stateful resource bound to one workspace root.

    Subclasses acquire their handles in :meth:`init` and must release them
    in :meth:`dispose`; the controller never reuses a disposed loader.
    """

    def __init__(self, root: str) -> None:
        self.root = root
        self.disposed = False
        self._on_did_change: EventEmitter[Loader] = EventEmitter(f"loader:{root}")

    @abstractmethod
    async def init(self) -> None: ...

    @property
    @abstractmethod
    def locales(self) -> list[str]: ...

    def on_did_change(self, listener: Callable[[Loader], None]) -> Callable[[], None]:
        return self._on_did_change.event(listener)

    def dispose(self) -> None:
        self.disposed = True
        self._on_did_change.dispose()


class DirectoryLocaleLoader(Loader):
    """Discover locale files under the configured locale directories.

    Files are matched against the derived path matchers; the ``locale``
    group of the first matching expression names the locale. File contents
    are not read.
    """

    def __init__(
        self,
        root: str,
        locales_paths: Sequence[str],
        path_matchers: Sequence[PathMatcher],
    ) -> None:
        super().__init__(root)
        self.locales_paths = list(locales_paths)
        self.path_matchers = list(path_matchers)
        self._files: dict[str, list[Path]] = {}

    async def init(self) -> None:
        self._files = self._discover()
        log.info(
            "loader.initialized",
            root=self.root,
            locales=self.locales,
            files=sum(len(v) for v in self._files.values()),
        )
        self._on_did_change.fire(self)

    async def reload(self) -> None:
        if self.disposed:
            return
        await self.init()

    @property
    def locales(self) -> list[str]:
        return sorted(self._files)

    def files(self, locale: str) -> list[Path]:
        return list(self._files.get(locale, []))

    def _discover(self) -> dict[str, list[Path]]:
        found: dict[str, list[Path]] = {}
        for locales_path in self.locales_paths:
            directory = Path(self.root, locales_path)
            if not directory.is_dir():
                log.info("loader.locales_path_missing", path=str(directory))
                continue
            for dirpath, _dirnames, filenames in os.walk(directory):
                for filename in sorted(filenames):
                    path = Path(dirpath, filename)
                    locale = self._match_locale(path.relative_to(directory).as_posix())
                    if locale is not None:
                        found.setdefault(locale, []).append(path)
        return found

    def _match_locale(self, relative: str) -> str | None:
        for matcher in self.path_matchers:
            m = matcher.regex.match(relative)
            if m and m.groupdict().get("locale"):
                return m.group("locale")
        return None

    def dispose(self) -> None:
        self._files = {}
        super().dispose()
