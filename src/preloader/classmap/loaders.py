"""Loading the class name -> file map produced by the dependency resolver.

Composer writes ``vendor/composer/autoload_classmap.php`` as a PHP array:

    $vendorDir = dirname(__DIR__);
    $baseDir = dirname($vendorDir);

    return array(
        'App\\Model\\User' => $baseDir . '/src/Model/User.php',
        'Psr\\Log\\LoggerInterface' => $vendorDir . '/psr/log/src/LoggerInterface.php',
    );

The same map can also be given as a flat JSON or YAML object.
"""

import logging
import re
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Union

import yaml

from ..config.loaders import is_data_file, load_file
from ..errors import ClassMapError

logger = logging.getLogger(__name__)

COMPOSER_DIR = "composer"
VENDOR_DIR = "vendor"
CLASSMAP_FILENAME = "autoload_classmap.php"

_PHP_STRING = r"'((?:[^'\\]|\\.)*)'"

_ENTRY = re.compile(
    r"^\s*%s\s*=>\s*(?:\$(vendorDir|baseDir)\s*\.\s*)?%s\s*,?\s*$" % (_PHP_STRING, _PHP_STRING),
    re.MULTILINE,
)

_PHP_ESCAPE = re.compile(r"\\([\\'])")


def _unescape(value: str) -> str:
    return _PHP_ESCAPE.sub(r"\1", value)


def locate_class_map(path: Path) -> Path:
    """Find the classmap file for a vendor directory or project root.

    Files are returned unchanged.
    """
    if not path.is_dir():
        return path

    for candidate in (
        path / COMPOSER_DIR / CLASSMAP_FILENAME,
        path / VENDOR_DIR / COMPOSER_DIR / CLASSMAP_FILENAME,
    ):
        if candidate.is_file():
            logger.debug("Found class map at: %s", candidate)
            return candidate

    raise ClassMapError(path, f"no {COMPOSER_DIR}/{CLASSMAP_FILENAME} found")


def parse_composer_class_map(content: str, path: Path) -> dict[str, str]:
    """Parse a Composer ``autoload_classmap.php`` file.

    ``$vendorDir`` is the directory above ``composer/`` and ``$baseDir`` the
    one above that, matching the definitions Composer writes into the file.
    """
    vendor_dir = path.absolute().parent.parent
    base_dir = vendor_dir.parent
    prefixes = {
        "vendorDir": vendor_dir.as_posix(),
        "baseDir": base_dir.as_posix(),
        None: "",
    }

    class_map: dict[str, str] = {}
    for match in _ENTRY.finditer(content):
        name, variable, file = match.groups()
        class_map[_unescape(name)] = prefixes[variable] + _unescape(file)

    if not class_map and "=>" in content:
        raise ClassMapError(path, "no class map entries could be parsed")

    return class_map


def _load_mapping(path: Path) -> dict[str, str]:
    try:
        data = load_file(path) or {}
    except (ValueError, RuntimeError, yaml.YAMLError) as e:
        raise ClassMapError(path, str(e)) from e

    if not isinstance(data, dict):
        raise ClassMapError(path, "expected an object of class name to file path")

    for name, file in data.items():
        if not isinstance(name, str) or not isinstance(file, str):
            raise ClassMapError(path, f"invalid entry {name!r}: {file!r}")

    return data


def load_class_map(path: Union[str, Path]) -> Mapping[str, str]:
    """
    Load a read-only class map.

    :param path: Composer ``autoload_classmap.php``, a vendor or project
        directory, or a ``.json``/``.yaml`` file.
    :raises ClassMapError: If the class map is missing or malformed.
    """
    path = locate_class_map(Path(path))

    if not path.is_file():
        raise ClassMapError(path, "file not found")

    logger.debug("Loading class map from: %s", path)

    if is_data_file(path):
        class_map = _load_mapping(path)
    elif path.suffix == ".php":
        class_map = parse_composer_class_map(path.read_text(encoding="utf-8"), path)
    else:
        raise ClassMapError(path, "unsupported file type")

    logger.info("Loaded %d class(es) from %s", len(class_map), path)
    return MappingProxyType(class_map)
