import sys
import tempfile
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

COMPOSER_CLASSMAP = r"""<?php

// autoload_classmap.php @generated by Composer

$vendorDir = dirname(__DIR__);
$baseDir = dirname($vendorDir);

return array(
    'App\\Bar' => $baseDir . '/src/Bar.php',
    'App\\Foo' => $baseDir . '/src/Foo.php',
    'App\\Service' => $baseDir . '/src/Service.php',
    'Composer\\InstalledVersions' => $vendorDir . '/composer/InstalledVersions.php',
    'Psr\\Log\\LoggerInterface' => $vendorDir . '/psr/log/src/LoggerInterface.php',
);
"""

SERVICE_SOURCE = r"""<?php declare(strict_types = 1);

namespace App;

use App\Foo;
use Psr\Log\LoggerInterface as Logger;
use Some\Unknown\Thing;

final class Service implements \App\Bar
{

	public function create(): Foo
	{
		return new \App\Foo();
	}

	public function now(): \DateTimeImmutable
	{
		return new \DateTimeImmutable();
	}

}
"""

PROJECT_CONFIG = """
class_map: vendor/composer/autoload_classmap.php
manifest: var/preload.json
scan:
  types:
    - "src/**/*.php"
  imports:
    - "src/**/*.php"
exclude_namespaces:
  - Composer
files:
  - bootstrap.php
compile:
  - "templates/*.php"
loader:
  script: var/preload.php
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def class_map():
    """Class map with two application classes."""
    return {
        "App\\Foo": "/src/Foo.php",
        "App\\Bar": "/src/Bar.php",
    }


@pytest.fixture
def write_manifest_file(temp_dir):
    """Write raw manifest text and return its path."""

    def _write(content: str, name: str = "preload.json") -> Path:
        path = temp_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def php_project(temp_dir):
    """Create a small PHP project with a Composer class map and preload.yaml."""
    composer_dir = temp_dir / "vendor" / "composer"
    composer_dir.mkdir(parents=True)
    (composer_dir / "autoload_classmap.php").write_text(COMPOSER_CLASSMAP, encoding="utf-8")

    src = temp_dir / "src"
    src.mkdir()
    (src / "Foo.php").write_text("<?php\n\nnamespace App;\n\nfinal class Foo\n{\n}\n")
    (src / "Bar.php").write_text("<?php\n\nnamespace App;\n\ninterface Bar\n{\n}\n")
    (src / "Service.php").write_text(SERVICE_SOURCE, encoding="utf-8")

    (temp_dir / "bootstrap.php").write_text("<?php\n\nrequire __DIR__ . '/vendor/autoload.php';\n")

    templates = temp_dir / "templates"
    templates.mkdir()
    (templates / "layout.php").write_text("<html><?= $content ?></html>\n")
    (templates / "page.php").write_text("<p><?= $title ?></p>\n")

    (temp_dir / "preload.yaml").write_text(PROJECT_CONFIG, encoding="utf-8")

    return temp_dir


@pytest.fixture
def reset_sys_modules():
    """Reset sys.modules for runtime tests that import files."""
    original_modules = set(sys.modules.keys())
    yield
    # Remove any modules added during the test
    new_modules = set(sys.modules.keys()) - original_modules
    for mod in new_modules:
        if not mod.startswith(('pytest', '_pytest', 'pluggy')):
            sys.modules.pop(mod, None)
