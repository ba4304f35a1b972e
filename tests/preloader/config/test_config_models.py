"""Tests for configuration models."""

from pathlib import Path

import pydantic
import pytest

from preloader.config.models import LoaderConfig, PreloaderConfig, ScanConfig, load_config


class TestLoaderConfig:

    def test_defaults(self):
        config = LoaderConfig()
        assert config.runtime == "php"
        assert config.php_binary == "php"
        assert config.sapi is None
        assert config.script == Path("var/preload.php")
        assert config.include_only is False
        assert config.check_environment is True

    def test_rejects_unknown_runtime(self):
        with pytest.raises(pydantic.ValidationError):
            LoaderConfig(runtime="java")

    def test_rejects_extra_fields(self):
        with pytest.raises(pydantic.ValidationError):
            LoaderConfig(unknown=True)


class TestScanConfig:

    def test_defaults(self):
        assert ScanConfig().types == []
        assert ScanConfig().imports == []


class TestPreloaderConfig:

    def test_defaults(self):
        config = PreloaderConfig()
        assert config.class_map == Path("vendor/composer/autoload_classmap.php")
        assert config.manifest == Path("var/preload.json")
        assert config.exclude == []
        assert config.loader == LoaderConfig()

    def test_invalid_pattern(self):
        with pytest.raises(pydantic.ValidationError, match="Invalid pattern"):
            PreloaderConfig(exclude=["("])

    def test_null_path_is_a_validation_error(self):
        with pytest.raises(pydantic.ValidationError):
            PreloaderConfig(class_map=None)

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PRELOADER_MANIFEST", "/tmp/other.json")
        monkeypatch.setenv("PRELOADER_LOADER__RUNTIME", "python")

        config = PreloaderConfig()

        assert config.manifest == Path("/tmp/other.json")
        assert config.loader.runtime == "python"

    def test_resolve(self, temp_dir):
        config = PreloaderConfig(root=temp_dir)

        assert config.resolve("var/preload.json") == temp_dir / "var" / "preload.json"
        assert config.resolve("/abs/preload.json") == Path("/abs/preload.json")

    def test_expand_globs(self, php_project):
        config = PreloaderConfig(root=php_project)

        paths = config.expand(["src/*.php", "src/Foo.php", "bootstrap.php"])

        assert paths == [
            php_project / "src" / "Bar.php",
            php_project / "src" / "Foo.php",
            php_project / "src" / "Service.php",
            php_project / "bootstrap.php",
        ]

    def test_expand_recursive_glob(self, php_project):
        nested = php_project / "src" / "Model"
        nested.mkdir()
        (nested / "User.php").write_text("<?php\n")
        config = PreloaderConfig(root=php_project)

        paths = config.expand(["src/**/*.php"])

        assert php_project / "src" / "Model" / "User.php" in paths
        assert php_project / "src" / "Foo.php" in paths

    def test_expand_keeps_literal_paths(self, temp_dir):
        config = PreloaderConfig(root=temp_dir)
        assert config.expand(["missing.php"]) == [temp_dir / "missing.php"]

    def test_expand_unmatched_glob(self, temp_dir, caplog):
        config = PreloaderConfig(root=temp_dir)

        with caplog.at_level("WARNING"):
            assert config.expand(["nothing/*.php"]) == []

        assert "matched no files" in caplog.text


class TestLoadConfig:

    def test_root_defaults_to_config_directory(self, php_project):
        config = load_config(php_project / "preload.yaml")

        assert config.root == php_project.absolute()
        assert config.scan.types == ["src/**/*.php"]
        assert config.exclude_namespaces == ["Composer"]
        assert config.loader.script == Path("var/preload.php")

    def test_relative_root_is_relative_to_config(self, temp_dir):
        path = temp_dir / "config" / "preload.yaml"
        path.parent.mkdir()
        path.write_text("root: ..\n")

        config = load_config(path)

        assert config.root == path.parent.absolute() / ".."

    def test_empty_file(self, temp_dir):
        path = temp_dir / "preload.yaml"
        path.write_text("")

        assert load_config(path).root == temp_dir.absolute()

    def test_null_root_defaults_to_config_directory(self, temp_dir):
        path = temp_dir / "preload.yaml"
        path.write_text("root:\n")

        assert load_config(path).root == temp_dir.absolute()

    def test_non_path_root(self, temp_dir):
        path = temp_dir / "preload.yaml"
        path.write_text("root: [a, b]\n")

        with pytest.raises(ValueError, match="root must be a path"):
            load_config(path)

    def test_non_mapping(self, temp_dir):
        path = temp_dir / "preload.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="must be a mapping"):
            load_config(path)

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_config(temp_dir / "preload.yaml")


class TestSampleConfig:

    def test_sample_config_is_valid(self):
        sample = Path(__file__).parents[3] / "examples" / "preload.yaml"

        config = load_config(sample)

        assert config.root == sample.parent.absolute() / ".."
        assert config.exclude_namespaces == ["Composer", "App\\Tests"]
        assert config.loader.sapi == "fpm-fcgi"
