"""Tests for the manifest scanner engine."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from i18nscope.core.errors import MalformedManifestError
from i18nscope.engines.manifest_scanner.formats import composer_json, package_json
from i18nscope.engines.manifest_scanner.registry import (
    FORMAT_REGISTRY,
    ManifestFormat,
    scan_manifests,
)
from i18nscope.engines.manifest_scanner.resolver import (
    PackageDependencyResolver,
    get_package_dependencies,
)


# ── helpers ──────────────────────────────────────────────────────────────


def _write_package(directory: Path, **blocks) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps({"name": directory.name, **blocks}))
    return path


def _events(logs: list[dict]) -> list[str]:
    return [entry["event"] for entry in logs]


# ── Format registry ──────────────────────────────────────────────────────


class TestRegistry:
    def test_builtin_formats_registered(self):
        assert {"package-json", "composer-json"}.issubset(FORMAT_REGISTRY)

    def test_format_filenames_and_ignore_dirs(self):
        npm = FORMAT_REGISTRY["package-json"]
        composer = FORMAT_REGISTRY["composer-json"]
        assert npm.filename == "package.json"
        assert npm.ignore_dirs == frozenset({"node_modules", ".git"})
        assert composer.filename == "composer.json"
        assert composer.ignore_dirs == frozenset({"vendor", ".git"})

    def test_default_ignore_dirs_is_git(self):
        fmt = ManifestFormat(id="x", filename="x.json", parse=lambda raw: frozenset())
        assert fmt.ignore_dirs == frozenset({".git"})


# ── scan_manifests ───────────────────────────────────────────────────────


class TestScanManifests:
    def test_empty_tree(self, tmp_path):
        assert scan_manifests(tmp_path, "package.json") == set()

    def test_root_manifest(self, tmp_path):
        root_pkg = _write_package(tmp_path)
        assert scan_manifests(tmp_path, "package.json") == {root_pkg}

    def test_nested_manifests(self, tmp_path):
        expected = {
            _write_package(tmp_path),
            _write_package(tmp_path / "packages" / "a"),
            _write_package(tmp_path / "packages" / "b" / "deep"),
        }
        assert scan_manifests(tmp_path, "package.json") == expected

    def test_paths_are_absolute(self, tmp_path, monkeypatch):
        _write_package(tmp_path / "app")
        monkeypatch.chdir(tmp_path)
        found = scan_manifests(Path("."), "package.json")
        assert all(p.is_absolute() for p in found)
        assert {p.parent.name for p in found} == {"app"}

    def test_ignored_subtree_is_skipped_entirely(self, tmp_path):
        keep = _write_package(tmp_path / "src")
        _write_package(tmp_path / "node_modules" / "vue-i18n")
        _write_package(tmp_path / "node_modules" / "x" / "nested")
        found = scan_manifests(tmp_path, "package.json", {"node_modules"})
        assert found == {keep}

    def test_ignore_only_matches_directory_names(self, tmp_path):
        nested = _write_package(tmp_path / "lib" / "vendor_tools")
        assert scan_manifests(tmp_path, "package.json", {"vendor"}) == {nested}

    def test_directory_named_like_manifest_is_not_collected(self, tmp_path):
        (tmp_path / "package.json").mkdir()
        assert scan_manifests(tmp_path, "package.json") == set()

    def test_symlinked_directories_not_entered(self, tmp_path):
        real = _write_package(tmp_path / "real")
        try:
            (tmp_path / "loop").symlink_to(tmp_path, target_is_directory=True)
        except OSError:
            pytest.skip("symlinks not supported")
        assert scan_manifests(tmp_path, "package.json") == {real}

    def test_unreadable_manifest_path_is_skipped(self, tmp_path, monkeypatch):
        readable = _write_package(tmp_path / "ok")
        _write_package(tmp_path / "locked")
        is_file = Path.is_file

        def _is_file(path):
            if path.parent.name == "locked":
                raise PermissionError(13, "Permission denied", str(path))
            return is_file(path)

        monkeypatch.setattr(Path, "is_file", _is_file)
        with capture_logs() as logs:
            assert scan_manifests(tmp_path, "package.json") == {readable}
        assert "manifest.dir_unreadable" in _events(logs)


# ── Formats ──────────────────────────────────────────────────────────────


class TestPackageJsonFormat:
    def test_unions_all_three_blocks(self):
        raw = json.dumps(
            {
                "dependencies": {"vue": "^3", "vue-i18n": "^9"},
                "devDependencies": {"vite": "^5"},
                "peerDependencies": {"vue": "*"},
            }
        )
        assert package_json.parse(raw) == {"vue", "vue-i18n", "vite"}

    def test_missing_blocks_is_empty(self):
        assert package_json.parse('{"name": "x"}') == frozenset()

    def test_empty_blocks_is_empty(self):
        raw = '{"dependencies": {}, "devDependencies": {}, "peerDependencies": {}}'
        assert package_json.parse(raw) == frozenset()

    def test_null_block_is_treated_as_absent(self):
        assert package_json.parse('{"dependencies": null}') == frozenset()

    def test_ignores_require_block(self):
        assert package_json.parse('{"require": {"a": "1"}}') == frozenset()

    @pytest.mark.parametrize("raw", ["", "{not json", "[1, 2]", '{"dependencies": ["a"]}'])
    def test_malformed(self, raw):
        with pytest.raises(MalformedManifestError):
            package_json.parse(raw)


class TestComposerJsonFormat:
    def test_require_block_only(self):
        raw = json.dumps(
            {
                "require": {"php": "^8.1", "laravel/framework": "^10"},
                "require-dev": {"phpunit/phpunit": "^10"},
            }
        )
        assert composer_json.parse(raw) == {"php", "laravel/framework"}

    def test_ignores_npm_blocks(self):
        assert composer_json.parse('{"dependencies": {"vue": "1"}}') == frozenset()

    def test_malformed(self):
        with pytest.raises(MalformedManifestError) as exc_info:
            composer_json.parse("{")
        assert exc_info.value.path == "composer.json"


# ── PackageDependencyResolver ────────────────────────────────────────────


class TestPackageDependencyResolver:
    @pytest.fixture
    def resolver(self):
        return PackageDependencyResolver()

    def test_not_found_is_none(self, resolver, tmp_path):
        with capture_logs() as logs:
            assert resolver.resolve(tmp_path, "package-json") is None
        assert "manifest.not_found" in _events(logs)

    def test_found_but_empty_is_empty_set(self, resolver, tmp_path):
        _write_package(tmp_path)
        result = resolver.resolve(tmp_path, "package-json")
        assert result is not None
        assert result == frozenset()

    def test_union_across_tree(self, resolver, tmp_path):
        _write_package(tmp_path, dependencies={"a": "1"})
        _write_package(tmp_path / "packages" / "web", devDependencies={"b": "1"})
        _write_package(tmp_path / "packages" / "api", peerDependencies={"a": "2", "c": "1"})
        with capture_logs() as logs:
            result = resolver.resolve(tmp_path, "package-json")
        assert result == {"a", "b", "c"}
        found = [e for e in logs if e["event"] == "manifest.found"]
        assert found and found[0]["count"] == 3

    def test_node_modules_dependencies_not_counted(self, resolver, tmp_path):
        _write_package(tmp_path, dependencies={"a": "1"})
        _write_package(tmp_path / "node_modules" / "dep", dependencies={"vue-i18n": "1"})
        assert resolver.resolve(tmp_path, "package-json") == {"a"}

    def test_parse_error_aborts_whole_root(self, resolver, tmp_path):
        _write_package(tmp_path, dependencies={"a": "1"})
        bad = tmp_path / "broken"
        bad.mkdir()
        (bad / "package.json").write_text("{ oops")
        with capture_logs() as logs:
            assert resolver.resolve(tmp_path, "package-json") is None
        events = _events(logs)
        assert "manifest.found" in events
        assert "manifest.parse_error" in events

    def test_deeply_nested_manifest_is_not_found(self, resolver, tmp_path):
        (tmp_path / "package.json").write_text("[" * 200000)
        with capture_logs() as logs:
            assert resolver.resolve(tmp_path, "package-json") is None
        assert "manifest.parse_error" in _events(logs)

    def test_resolve_all_per_format(self, resolver, tmp_path):
        _write_package(tmp_path, dependencies={"vue-i18n": "1"})
        result = resolver.resolve_all(tmp_path)
        assert result["package-json"] == {"vue-i18n"}
        assert result["composer-json"] is None

    def test_custom_format_mapping(self, tmp_path):
        fmt = ManifestFormat(
            id="lines",
            filename="deps.txt",
            parse=lambda raw: frozenset(raw.split()),
        )
        (tmp_path / "deps.txt").write_text("x y\n")
        resolver = PackageDependencyResolver({"lines": fmt})
        assert resolver.format_ids == ["lines"]
        assert resolver.resolve_all(tmp_path) == {"lines": {"x", "y"}}

    def test_module_level_helper(self, tmp_path):
        (tmp_path / "composer.json").write_text('{"require": {"laravel/framework": "^10"}}')
        result = get_package_dependencies(tmp_path)
        assert result["composer-json"] == {"laravel/framework"}
        assert result["package-json"] is None
