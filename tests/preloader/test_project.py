"""Tests for project-level build and preload."""

import json
from unittest.mock import MagicMock

import pytest

from preloader.config.models import load_config
from preloader.errors import EnvironmentCheckError, UnknownClassError
from preloader.project import build_manifest, create_builder, create_preloader, get_class_map, run_preload
from preloader.runtime.protocols import RuntimeEnvironment


@pytest.fixture
def config(php_project):
    return load_config(php_project / "preload.yaml")


@pytest.fixture
def runtime():
    runtime = MagicMock()
    runtime.environment.return_value = RuntimeEnvironment(
        "Opcache", "opcache_compile_file", True, True, True, True
    )
    return runtime


class TestCreateBuilder:

    def test_discovers_classes_from_sources(self, config):
        builder = create_builder(config)

        assert builder.get_registered_types() == [
            "App\\Foo",
            "App\\Bar",
            "Psr\\Log\\LoggerInterface",
        ]

    def test_fills_auxiliary_lists(self, config, php_project):
        manifest = create_builder(config).to_manifest()

        assert manifest.files == [str(php_project / "bootstrap.php")]
        assert manifest.compile == [
            str(php_project / "templates" / "layout.php"),
            str(php_project / "templates" / "page.php"),
        ]

    def test_exclusions_apply_to_scans(self, config):
        config.exclude = ["^Psr\\\\"]

        assert "Psr\\Log\\LoggerInterface" not in create_builder(config).get_registered_types()

    def test_excluded_namespace_beats_preload_namespace(self, config):
        config.preload_namespaces = ["Composer", "App"]

        types = create_builder(config).get_registered_types()

        assert types[:3] == ["App\\Bar", "App\\Foo", "App\\Service"]
        assert "Composer\\InstalledVersions" not in types

    def test_preload_patterns(self, config):
        config.scan.types = []
        config.scan.imports = []
        config.preload = ["Service$"]

        assert create_builder(config).get_registered_types() == ["App\\Service"]

    def test_explicit_class_map(self, config):
        config.scan.imports = []

        builder = create_builder(config, class_map={"App\\Foo": "/elsewhere/Foo.php"})

        assert builder.get_registered_types() == ["App\\Foo"]


class TestBuildManifest:

    def test_writes_configured_manifest(self, config, php_project):
        _, path = build_manifest(config)

        assert path == php_project / "var" / "preload.json"
        assert json.loads(path.read_text())["classes"] == [
            "App\\Foo",
            "App\\Bar",
            "Psr\\Log\\LoggerInterface",
        ]

    def test_output_override(self, config, php_project):
        _, path = build_manifest(config, output=php_project / "out.json")
        assert path == php_project / "out.json"


class TestRunPreload:

    def test_round_trip_resolves_class_map_paths(self, config, runtime):
        build_manifest(config)
        class_map = get_class_map(config)

        _, result = run_preload(config, runtime=runtime)

        required = [c.args[0] for c in runtime.ensure_loaded.call_args_list if c.kwargs["required"]]
        assert required == [
            class_map["App\\Foo"],
            class_map["App\\Bar"],
            class_map["Psr\\Log\\LoggerInterface"],
        ]
        assert result.classes == 3
        assert result.files == 1
        assert result.compiles == 2

    def test_include_only_from_config(self, config, runtime):
        build_manifest(config)
        config.loader.include_only = True

        _, result = run_preload(config, runtime=runtime)

        runtime.compile_file.assert_not_called()
        assert result.compiles == 0

    def test_environment_failure_stops_before_loading(self, config, runtime):
        build_manifest(config)
        runtime.environment.return_value = RuntimeEnvironment(
            "Opcache", "opcache_compile_file", False, True, True, True
        )

        with pytest.raises(EnvironmentCheckError):
            run_preload(config, runtime=runtime)

        runtime.ensure_loaded.assert_not_called()

    def test_skip_environment_check(self, config, runtime):
        build_manifest(config)

        run_preload(config, runtime=runtime, check_environment=False)

        runtime.environment.assert_not_called()

    def test_stale_manifest(self, config, runtime):
        build_manifest(config)

        with pytest.raises(UnknownClassError):
            run_preload(config, runtime=runtime, class_map={"App\\Foo": "/src/Foo.php"})

        runtime.ensure_loaded.assert_not_called()

    def test_create_preloader_uses_configured_runtime(self, config):
        build_manifest(config)
        config.loader.runtime = "python"

        preloader = create_preloader(config)

        assert type(preloader.runtime).__name__ == "ImportlibRuntime"
