"""ContextController: enabled/disabled state machine and per-root loader registry."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable, Callable, Iterable
from typing import Protocol

import structlog

from i18nscope.context.activation import (
    ActivationContext,
    NearestActivationResolver,
    ancestor_folders,
)
from i18nscope.context.events import ConfigChanged, EventEmitter, HostState, Message
from i18nscope.context.loader import DirectoryLocaleLoader, Loader
from i18nscope.context.settings import DerivedSettingsCache, KeyStylePrompt
from i18nscope.core.config import (
    EXT_NAMESPACE,
    REFRESH_CONFIGS,
    RELOAD_CONFIGS,
    USAGE_REFRESH_CONFIGS,
    ConfigStore,
    KeyStyle,
    affects_configuration,
)
from i18nscope.engines.manifest_scanner.resolver import PackageDependencyResolver
from i18nscope.frameworks.base import Framework
from i18nscope.frameworks.registry import FrameworkRegistry, create_default_registry

log = structlog.get_logger("i18nscope.context")

LoaderFactory = Callable[[str], Loader]


class Analyst(Protocol):
    """Usage-analysis cache owner."""

    def refresh(self) -> None: ...


class StatusSurface(Protocol):
    """Host status/context keys (e.g. menu visibility flags)."""

    def set_context(self, name: str, value: object) -> None: ...


def _first_affected(changed: list[str], config_keys: Iterable[str]) -> str | None:
    for key in config_keys:
        if any(affects_configuration(c, key) for c in changed):
            return key
    return None


class ContextController:
    """Owns the workspace context for one process.

    Feed it host messages through :meth:`handle` (or call
    :meth:`update_root_paths` / :meth:`update` directly). ``update`` calls
    are serialised; one issued while another is suspended waits for it and
    then re-evaluates the latest state.

    Call :meth:`dispose` on teardown to release every loader.
    """

    def __init__(
        self,
        config: ConfigStore,
        *,
        registry: FrameworkRegistry | None = None,
        dependency_resolver: PackageDependencyResolver | None = None,
        settings: DerivedSettingsCache | None = None,
        loader_factory: LoaderFactory | None = None,
        analyst: Analyst | None = None,
        status: StatusSurface | None = None,
        locales_guide: Callable[[], Awaitable[None]] | None = None,
        key_style_prompt: KeyStylePrompt | None = None,
    ) -> None:
        self.config = config
        self.registry = registry or create_default_registry()
        self.settings = settings or DerivedSettingsCache(config)
        self._activation_resolver = NearestActivationResolver(self.registry, dependency_resolver)
        self._loader_factory = loader_factory or self._directory_loader
        self._analyst = analyst
        self._status = status
        self._locales_guide = locales_guide
        self._key_style_prompt = key_style_prompt

        self._workspace_root: str | None = None
        self._active_file_dir: str | None = None
        self._activation = ActivationContext(None, None)
        self._enabled = False
        self._loaders: dict[str, Loader] = {}
        self._loader_subscriptions: dict[str, Callable[[], None]] = {}
        self._last_loader: Loader | None = None
        self._lock = asyncio.Lock()

        self.on_did_change_workspace_root: EventEmitter[str] = EventEmitter("workspace_root")
        self.on_did_change_enabled: EventEmitter[bool] = EventEmitter("enabled")
        self.on_did_change_loader: EventEmitter[Loader | None] = EventEmitter("loader")

    # ── state ────────────────────────────────────────────────────────────

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def workspace_root(self) -> str | None:
        return self._workspace_root

    @property
    def active_file_dir(self) -> str | None:
        return self._active_file_dir

    @property
    def activation(self) -> ActivationContext:
        return self._activation

    @property
    def frameworks(self) -> tuple[Framework, ...]:
        return self._activation.frameworks

    @property
    def nearest_enabled_framework_path(self) -> str | None:
        return self._activation.activation_folder

    @property
    def loader(self) -> Loader | None:
        if self._workspace_root is None:
            return None
        return self._loaders.get(self._workspace_root)

    @property
    def all_locales(self) -> list[str]:
        loader = self.loader
        return loader.locales if loader is not None else []

    @property
    def visible_locales(self) -> list[str]:
        return self.settings.visible_locales(self.all_locales)

    def locales_paths(self) -> list[str] | None:
        return self.settings.locales_paths(self._workspace_root)

    async def request_key_style(self) -> KeyStyle:
        return await self.settings.request_key_style(self._key_style_prompt)

    # ── inbound ──────────────────────────────────────────────────────────

    async def handle(self, message: Message) -> None:
        if isinstance(message, ConfigChanged):
            await self.update(changed_keys=message.keys)
        elif isinstance(message, HostState):
            await self.update_root_paths(message.workspace_root, message.active_file)
        else:
            raise TypeError(f"unsupported message: {message!r}")

    async def update_root_paths(self, workspace_root: str | None, active_file: str | None) -> bool:
        """Record the host's current root and active file; update if either moved.

        Returns True if an update ran.
        """
        if not workspace_root:
            return False

        update_needed = False
        if workspace_root != self._workspace_root:
            self._workspace_root = workspace_root
            log.info("context.root_changed", workspace_root=workspace_root)
            update_needed = True
            if (
                not active_file
                and self._active_file_dir is not None
                and ancestor_folders(workspace_root, self._active_file_dir) is None
            ):
                # The old active directory belongs to another root.
                self._active_file_dir = None
            self.on_did_change_workspace_root.fire(workspace_root)

        if active_file:
            active_dir = os.path.dirname(active_file)
            if active_dir != self._active_file_dir:
                self._active_file_dir = active_dir
                update_needed = True

        if update_needed:
            await self.update()
        return update_needed

    async def update(self, changed_keys: Iterable[str] | None = None) -> None:
        async with self._lock:
            needs_guide = await self._update(changed_keys)
        # Outside the lock: the guide may write config and trigger another update.
        if needs_guide and self._locales_guide is not None:
            await self._locales_guide()

    # ── state machine ────────────────────────────────────────────────────

    async def _update(self, changed_keys: Iterable[str] | None) -> bool:
        """Re-evaluate the context. Returns True if the locale-path guide should run."""
        reload = False
        needs_guide = False
        if changed_keys is not None:
            changed = list(changed_keys)
            reload_key = _first_affected(changed, RELOAD_CONFIGS)
            refresh_key = _first_affected(changed, REFRESH_CONFIGS)
            usage_key = _first_affected(changed, USAGE_REFRESH_CONFIGS)

            if usage_key is not None:
                log.info("config.changed", key=usage_key, scope="usage")
                if self._analyst is not None:
                    self._analyst.refresh()

            if reload_key is None and refresh_key is None:
                return False

            reload = reload_key is not None
            log.info("config.changed", key=reload_key or refresh_key, reload=reload)
            self.settings.reset()

        self._activation = self._compute_activation()
        self.settings.set_frameworks(self._activation.frameworks)

        parsers = self.settings.enabled_parsers
        is_valid_project = bool(self._activation.frameworks) and bool(parsers)
        has_locales_set = self.locales_paths() is not None
        disabled = self.config.config.disabled
        self._set_enabled(not disabled and is_valid_project and has_locales_set)

        if self._enabled:
            log.info(
                "context.frameworks",
                frameworks=[f.display for f in self._activation.frameworks],
                parsers=[p.id for p in parsers],
                folder=self._activation.activation_folder,
            )
            self._set_status(
                f"{EXT_NAMESPACE}.extract.autoDetect", self.config.config.extract_auto_detect
            )
            await self._init_loader(self._workspace_root, reload)
        else:
            if not disabled:
                if not is_valid_project and has_locales_set:
                    log.info("context.invalid_project", workspace_root=self._workspace_root)
                if is_valid_project and not has_locales_set and self.config.config.auto_detection:
                    log.info("context.locales_paths_missing", workspace_root=self._workspace_root)
                    needs_guide = True
            self._unload_all()

        self._fire_loader_changed()
        return needs_guide

    def _compute_activation(self) -> ActivationContext:
        root = self._workspace_root
        if not root:
            return ActivationContext(None, self._active_file_dir)

        ids = self.config.config.enabled_frameworks
        if ids:
            frameworks = tuple(self.registry.by_ids(ids))
            return ActivationContext(
                workspace_root=root,
                active_file_dir=self._active_file_dir,
                frameworks=frameworks,
                activation_folder=root if frameworks else None,
            )

        current = self._active_file_dir or root
        return self._activation_resolver.resolve(root, current)

    def _set_enabled(self, value: bool) -> None:
        if self._enabled == value:
            return
        log.info("context.enabled" if value else "context.disabled")
        self._enabled = value
        self._set_status(f"{EXT_NAMESPACE}-enabled", value)
        self.on_did_change_enabled.fire(value)

    def _set_status(self, name: str, value: object) -> None:
        if self._status is not None:
            self._status.set_context(name, value)

    # ── loaders ──────────────────────────────────────────────────────────

    def _directory_loader(self, root: str) -> Loader:
        return DirectoryLocaleLoader(
            root,
            self.settings.locales_paths(root) or [],
            self.settings.path_matchers(),
        )

    async def _init_loader(self, root: str | None, reload: bool = False) -> Loader | None:
        if not root:
            return None

        existing = self._loaders.get(root)
        if existing is not None and not reload:
            return existing
        if existing is not None:
            log.info("loader.reload", root=root)
            self._dispose_loader(root)

        loader = self._loader_factory(root)
        try:
            await loader.init()
        except Exception:
            log.exception("loader.init_failed", root=root)
            loader.dispose()
            return None

        self._loader_subscriptions[root] = loader.on_did_change(
            lambda changed: self.on_did_change_loader.fire(changed)
        )
        self._loaders[root] = loader
        return loader

    def _dispose_loader(self, root: str) -> None:
        unsubscribe = self._loader_subscriptions.pop(root, None)
        if unsubscribe is not None:
            unsubscribe()
        loader = self._loaders.pop(root, None)
        if loader is not None:
            loader.dispose()

    def _unload_all(self) -> None:
        for root in list(self._loaders):
            self._dispose_loader(root)

    def _fire_loader_changed(self) -> None:
        current = self.loader
        if current is self._last_loader:
            return
        self._last_loader = current
        self.on_did_change_loader.fire(current)

    def dispose(self) -> None:
        """Release every loader and drop all subscribers."""
        self._unload_all()
        self._last_loader = None
        self.on_did_change_workspace_root.dispose()
        self.on_did_change_enabled.dispose()
        self.on_did_change_loader.dispose()
