"""Usage-match regex normalisation."""

from __future__ import annotations

import re
from collections.abc import Iterable

import structlog

log = structlog.get_logger("i18nscope.settings")


def normalize_usage_match_regex(
    fragments: Iterable[str | re.Pattern[str]],
    regex_key: str,
) -> list[re.Pattern[str]]:
    """Compile usage-match fragments, substituting ``{key}`` with *regex_key*.

    Fragments that fail to compile are logged and dropped.
    """
    compiled: list[re.Pattern[str]] = []
    for fragment in fragments:
        if isinstance(fragment, re.Pattern):
            compiled.append(fragment)
            continue
        try:
            compiled.append(re.compile(fragment.replace("{key}", regex_key), re.MULTILINE))
        except re.error as exc:
            log.warning("regex.invalid", pattern=fragment, error=str(exc))
    return compiled
