"""Tests for the framework contract, registry and built-in catalog."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from i18nscope.core.errors import UnknownFrameworkError
from i18nscope.frameworks.base import Framework, get_ext_of_language_id
from i18nscope.frameworks.builtin import BUILTIN_FRAMEWORKS
from i18nscope.frameworks.registry import FrameworkRegistry, create_default_registry


def _fw(framework_id: str, *deps: str, **kwargs) -> Framework:
    return Framework(
        id=framework_id,
        display=framework_id.title(),
        detection={"package-json": deps},
        **kwargs,
    )


# ── Framework ────────────────────────────────────────────────────────────


class TestFramework:
    def test_enabled_by_any_declared_dependency(self):
        fw = _fw("vue", "vue-i18n", "nuxt-i18n")
        assert fw.is_enabled({"package-json": frozenset({"nuxt-i18n"})}, "/r")

    def test_not_enabled_when_format_not_found(self):
        fw = _fw("vue", "vue-i18n")
        assert not fw.is_enabled({"package-json": None}, "/r")
        assert not fw.is_enabled({}, "/r")

    def test_not_enabled_by_other_format(self):
        fw = _fw("vue", "vue-i18n")
        assert not fw.is_enabled({"composer-json": frozenset({"vue-i18n"})}, "/r")

    def test_custom_detector_receives_root(self):
        seen = []

        def detector(packages, root):
            seen.append(root)
            return root.endswith("web")

        fw = Framework(id="custom", display="Custom", detector=detector)
        assert fw.is_enabled({}, "/ws/web")
        assert not fw.is_enabled({}, "/ws/api")
        assert seen == ["/ws/web", "/ws/api"]

    def test_usage_regex_by_language(self):
        fw = Framework(
            id="x",
            display="X",
            usage_match_regex=("default",),
            usage_match_regex_by_language={"blade": ("blade",)},
        )
        assert fw.get_usage_match_regex() == ("default",)
        assert fw.get_usage_match_regex("php", "a.php") == ("default",)
        assert fw.get_usage_match_regex("blade", "a.blade.php") == ("blade",)

    def test_default_path_matchers(self):
        fw = Framework(id="x", display="X")
        assert fw.path_matchers("file") == ("{locale}.{ext}",)
        assert fw.path_matchers("dir") == ("{locale}/**/*.{ext}",)
        assert fw.path_matchers("dir", namespace=True) == ("{locale}/**/{namespace}.{ext}",)
        assert fw.path_matchers(None) == ("{locale}/**/*.{ext}",)

    def test_path_matcher_rules_override_defaults(self):
        fw = Framework(id="x", display="X", path_matcher_rules={"dir": ("{locale}/{namespaces}.{ext}",)})
        assert fw.path_matchers("dir", namespace=True) == ("{locale}/{namespaces}.{ext}",)
        assert fw.path_matchers("file") == ("{locale}.{ext}",)

    def test_identity_semantics(self):
        assert _fw("a") != _fw("a")
        fw = _fw("a")
        assert fw == fw

    def test_language_ext_lookup(self):
        assert get_ext_of_language_id("typescriptreact") == ("tsx",)
        assert get_ext_of_language_id("unknownlang") == ("unknownlang",)


# ── FrameworkRegistry ────────────────────────────────────────────────────


class TestFrameworkRegistry:
    @pytest.fixture
    def registry(self):
        registry = FrameworkRegistry()
        for fw in (_fw("a", "x"), _fw("b", "y"), _fw("c", "x")):
            registry.register(fw)
        return registry

    def test_enabled_for_keeps_registry_order(self, registry):
        enabled = registry.enabled_for({"package-json": frozenset({"x", "y"})}, "/r")
        assert [f.id for f in enabled] == ["a", "b", "c"]

    def test_enabled_for_none(self, registry):
        assert registry.enabled_for({"package-json": None}, "/r") == []

    def test_by_ids_skips_unknown_and_logs(self, registry):
        with capture_logs() as logs:
            frameworks = registry.by_ids(["c", "nope", "a", "c"])
        assert [f.id for f in frameworks] == ["c", "a"]
        warnings = [e for e in logs if e["event"] == "frameworks.unsupported"]
        assert warnings and warnings[0]["ids"] == ["nope"]

    def test_get_and_require(self, registry):
        assert registry.get("a").id == "a"
        assert registry.get("zzz") is None
        with pytest.raises(UnknownFrameworkError):
            registry.require("zzz")

    def test_list_all(self, registry):
        assert [f.id for f in registry.list_all()] == ["a", "b", "c"]


# ── Built-in catalog ─────────────────────────────────────────────────────


class TestBuiltinCatalog:
    def test_default_registry_holds_catalog(self):
        registry = create_default_registry()
        assert [f.id for f in registry.list_all()] == [f.id for f in BUILTIN_FRAMEWORKS]

    @pytest.mark.parametrize(
        ("packages", "expected"),
        [
            ({"package-json": frozenset({"vue-i18n"})}, ["vue"]),
            ({"package-json": frozenset({"react-i18next", "i18next"})}, ["react-i18next", "i18next"]),
            ({"package-json": frozenset({"svelte-i18n"})}, ["svelte"]),
            ({"composer-json": frozenset({"laravel/framework"})}, ["laravel"]),
            ({"package-json": frozenset({"react"}), "composer-json": None}, []),
        ],
    )
    def test_detection(self, packages, expected):
        registry = create_default_registry()
        assert [f.id for f in registry.enabled_for(packages, "/r")] == expected

    def test_ids_are_unique(self):
        ids = [f.id for f in BUILTIN_FRAMEWORKS]
        assert len(ids) == len(set(ids))
