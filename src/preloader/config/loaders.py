"""Reading the YAML and JSON data files: ``preload.yaml`` and flat class maps."""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Union

import yaml

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)

_PARSERS: dict[str, Callable[[str], Any]] = {
    **{suffix: yaml.safe_load for suffix in YAML_SUFFIXES},
    **{suffix: json.loads for suffix in JSON_SUFFIXES},
}


def is_data_file(path: Union[str, Path]) -> bool:
    """Whether ``path`` has a suffix ``load_file`` can parse."""
    return Path(path).suffix.lower() in _PARSERS


def load_file(path: Union[str, Path]) -> Any:
    """
    Parse a YAML or JSON file, picking the parser from the suffix.

    The shape of the result is left to the caller; a blank file gives an
    empty dict.

    :raises FileNotFoundError: If the file does not exist.
    :raises IsADirectoryError: If the path is a directory.
    :raises RuntimeError: If the suffix is not a YAML or JSON one.
    :raises ValueError: If a JSON file is malformed or a file is not UTF-8.
    :raises yaml.YAMLError: If a YAML file is malformed.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path.absolute()}")
    if path.is_dir():
        raise IsADirectoryError(path.absolute())

    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise RuntimeError("Invalid file type given: %s" % path.name)

    content = path.read_text(encoding="utf-8")
    if not content.strip():
        logger.debug("File is empty: %s", path)
        return {}

    logger.debug("Parsing %s", path)
    return parser(content)
