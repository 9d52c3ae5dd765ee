"""Compile locale path-matcher templates into regular expressions.

Templates use ``{locale}``, ``{locale?}``, ``{namespace}``, ``{namespaces}``
and ``{ext}`` placeholders plus ``*`` / ``**`` globs, e.g.
``{locale}/**/{namespace}.{ext}``.
"""

from __future__ import annotations

import re


def parse_path_matcher(matcher: str, exts: str = "") -> re.Pattern[str]:
    """Compile *matcher* into a regex matched against slash-separated relative paths.

    *exts* is a regex alternation of allowed extensions (``json|ya?ml``).
    """
    regstr = (
        matcher.replace(".", r"\.")
        .replace(".*", "..*", 1)
        .replace(r"*\.", r".*\.", 1)
    )
    regstr = re.sub(r"/?\*\*/", "(?:.*/|^)", regstr)
    regstr = (
        regstr.replace("{locale}", r"(?P<locale>[\w-]+)", 1)
        .replace("{locale?}", r"(?P<locale>[\w-]*?)", 1)
        .replace("{namespace}", r"(?P<namespace>[^/\\]+)", 1)
        .replace("{namespaces}", r"(?P<namespace>.+)", 1)
        .replace("{ext}", f"(?P<ext>{exts})", 1)
    )
    return re.compile(f"^{regstr}$")
