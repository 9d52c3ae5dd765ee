"""Manifest formats: auto-registered on import."""

from i18nscope.engines.manifest_scanner.formats import (
    composer_json,  # noqa: F401
    package_json,  # noqa: F401
)
