"""Tests for the preload command."""

import json
from unittest.mock import patch

import pytest

from preloader.commands.base import CommandContext
from preloader.commands.build import BuildCommand
from preloader.commands.preload import PreloadCommand
from preloader.errors import EnvironmentCheckError, UnknownClassError
from preloader.runtime.protocols import RuntimeEnvironment

_GOOD_ENV = RuntimeEnvironment("Opcache", "opcache_compile_file", True, True, True, True)


@pytest.fixture
def ctx(php_project):
    def _ctx(*args):
        return CommandContext(
            command="preload",
            args=list(args),
            config_path=str(php_project / "preload.yaml"),
        )

    return _ctx


@pytest.fixture
def built(ctx):
    assert BuildCommand().execute(CommandContext(command="build", config_path=ctx().config_path)) == 0


@pytest.fixture
def probe():
    with patch("preloader.runtime.php.PhpProbe.probe", return_value=_GOOD_ENV) as mock_probe:
        yield mock_probe


class TestPreloadCommand:

    def test_properties(self):
        command = PreloadCommand()
        assert command.name == "preload"
        assert "--include-only" in command.help_text

    @pytest.mark.usefixtures("built")
    def test_writes_php_script(self, ctx, php_project, probe, capsys):
        assert PreloadCommand().execute(ctx()) == 0

        script = (php_project / "var" / "preload.php").read_text()
        foo = (php_project / "src" / "Foo.php").as_posix()
        assert f"require_once '{foo}';" in script
        assert f"include_once '{php_project / 'bootstrap.php'}';" in script
        assert "opcache_compile_file(" in script
        probe.assert_called_once()
        assert "Preloaded 3 class(es), 1 file(s), 2 compile(s)" in capsys.readouterr().out

    @pytest.mark.usefixtures("built")
    def test_include_only(self, ctx, php_project, probe, capsys):
        assert PreloadCommand().execute(ctx("--include-only", "-o", "out/preload.php")) == 0

        script = (php_project / "out" / "preload.php").read_text()
        assert "opcache_compile_file('" not in script
        assert "0 compile(s)" in capsys.readouterr().out

    @pytest.mark.usefixtures("built")
    def test_skip_check(self, ctx, probe):
        assert PreloadCommand().execute(ctx("--skip-check")) == 0
        probe.assert_not_called()

    @pytest.mark.usefixtures("built")
    def test_environment_failure(self, ctx, php_project):
        with patch(
            "preloader.runtime.php.PhpProbe.probe",
            return_value=RuntimeEnvironment("Opcache", "opcache_compile_file", False, True, True, True),
        ):
            with pytest.raises(EnvironmentCheckError, match="Opcache is not available."):
                PreloadCommand().execute(ctx())

        assert not (php_project / "var" / "preload.php").exists()

    def test_stale_manifest(self, ctx, php_project, probe):
        (php_project / "var").mkdir()
        (php_project / "var" / "preload.json").write_text(
            json.dumps({"classes": ["App\\Missing"], "files": [], "compile": []})
        )

        with pytest.raises(UnknownClassError):
            PreloadCommand().execute(ctx())

        assert not (php_project / "var" / "preload.php").exists()

    def test_python_runtime(self, ctx, php_project, reset_sys_modules):
        (php_project / "var").mkdir()
        module = php_project / "warm.py"
        module.write_text("LOADED = True\n")
        (php_project / "var" / "preload.json").write_text(
            json.dumps({"classes": [], "files": [str(module)], "compile": [str(module)]})
        )

        assert PreloadCommand().execute(ctx("--runtime", "python", "--skip-check")) == 0
        assert not (php_project / "var" / "preload.php").exists()

    def test_unknown_runtime(self, ctx):
        assert PreloadCommand().execute(ctx("--runtime", "java")) == 1

    def test_unknown_argument(self, ctx):
        assert PreloadCommand().execute(ctx("--bogus")) == 1
