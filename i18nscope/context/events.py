"""Outbound event emitters and inbound host messages."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

import structlog

log = structlog.get_logger("i18nscope.context")

T = TypeVar("T")


class EventEmitter(Generic[T]):
    """Single-argument event with any number of listeners.

    A failing listener is logged and does not prevent delivery to the rest.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: list[Callable[[T], None]] = []

    def event(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Subscribe *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def fire(self, value: T) -> None:
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                log.exception("event.listener_failed", event=self.name)

    def dispose(self) -> None:
        self._listeners.clear()


# ── inbound messages ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class HostState:
    """Snapshot of the host's workspace root and active file at event time."""

    workspace_root: str | None
    active_file: str | None = None


class RootChanged(HostState):
    """Workspace folders changed."""


class ActiveFileChanged(HostState):
    """The active editor switched to another file."""


class DocumentOpened(HostState):
    pass


class DocumentClosed(HostState):
    pass


@dataclass(frozen=True)
class ConfigChanged:
    """One or more configuration keys changed (dotted names, namespace optional)."""

    keys: tuple[str, ...]


Message = Union[RootChanged, ActiveFileChanged, DocumentOpened, DocumentClosed, ConfigChanged]
