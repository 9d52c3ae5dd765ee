"""Shared helpers for JSON-based manifests."""

from __future__ import annotations

import json
from typing import Any

from i18nscope.core.errors import MalformedManifestError


def load_object(raw: str, source: str) -> dict[str, Any]:
    """Decode *raw* as a JSON object, raising MalformedManifestError otherwise."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise MalformedManifestError(source, str(exc)) from exc
    if not isinstance(data, dict):
        raise MalformedManifestError(source, "top-level value is not an object")
    return data


def block_keys(data: dict[str, Any], block: str, source: str) -> set[str]:
    """Return the keys of an optional ``{name: version}`` block."""
    value = data.get(block)
    # A null block counts as absent, not as a parse error that aborts the root.
    if value is None:
        return set()
    if not isinstance(value, dict):
        raise MalformedManifestError(source, f'"{block}" is not an object')
    return set(value)
