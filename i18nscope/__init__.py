"""i18nscope: framework detection and locale-loader lifecycle for project workspaces."""

__version__ = "0.1.0"
