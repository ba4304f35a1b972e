import glob
import logging
import re
from pathlib import Path
from typing import Iterable, Literal, Optional, Union

import pydantic

from .base import Settings
from .loaders import load_file
from ..utils import OrderedSet, expanded_path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "preload.yaml"

_GLOB_CHARS = re.compile(r"[*?\[]")


class ScanConfig(pydantic.BaseModel):
    """Source globs scanned for class usages."""

    types: list[str] = pydantic.Field(
        default_factory=list,
        description="Files scanned for return types, `new` and `implements`",
    )
    imports: list[str] = pydantic.Field(
        default_factory=list,
        description="Files scanned for `use` statements",
    )

    model_config = pydantic.ConfigDict(extra="forbid")


class LoaderConfig(pydantic.BaseModel):
    """Settings for replaying the manifest."""

    runtime: Literal["php", "python"] = "php"
    php_binary: str = "php"
    sapi: Optional[str] = pydantic.Field(
        default=None,
        description="SAPI that runs the preload script; defaults to the probed one",
    )
    script: Path = Path("var/preload.php")
    include_only: bool = False
    check_environment: bool = True

    model_config = pydantic.ConfigDict(extra="forbid")


class PreloaderConfig(Settings):
    root: Path = pydantic.Field(
        default=Path("."),
        description="Project root; relative paths and globs resolve against it",
    )
    class_map: Path = Path("vendor/composer/autoload_classmap.php")
    manifest: Path = Path("var/preload.json")

    scan: ScanConfig = pydantic.Field(default_factory=ScanConfig)

    exclude: list[str] = pydantic.Field(default_factory=list)
    exclude_namespaces: list[str] = pydantic.Field(default_factory=list)
    preload: list[str] = pydantic.Field(default_factory=list)
    preload_namespaces: list[str] = pydantic.Field(default_factory=list)

    files: list[str] = pydantic.Field(default_factory=list)
    compile: list[str] = pydantic.Field(default_factory=list)

    loader: LoaderConfig = pydantic.Field(default_factory=LoaderConfig)

    @pydantic.field_validator("root", "class_map", "manifest", mode="before")
    @classmethod
    def validate_paths(cls, v):
        if isinstance(v, (str, Path)):
            return expanded_path(v)
        return v

    @pydantic.field_validator("exclude", "preload")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid pattern {pattern!r}: {e}") from e
        return v

    def resolve(self, path: Union[str, Path]) -> Path:
        """Resolve ``path`` against the project root."""
        path = expanded_path(path)
        return path if path.is_absolute() else self.root / path

    def expand(self, patterns: Iterable[str]) -> list[Path]:
        """Expand globs against the project root, keeping plain paths as given.

        Matches of each glob are sorted; duplicates keep their first position.
        """
        paths: OrderedSet[Path] = OrderedSet()
        for pattern in patterns:
            resolved = self.resolve(pattern)
            if not _GLOB_CHARS.search(pattern):
                paths.add(resolved)
                continue

            matches = sorted(
                Path(match) for match in glob.glob(str(resolved), recursive=True)
                if Path(match).is_file()
            )
            if not matches:
                logger.warning("Pattern matched no files: %s", pattern)
            for match in matches:
                paths.add(match)
        return paths.to_list()


def load_config(path: Optional[Path] = None) -> PreloaderConfig:
    """
    Load the project configuration file.

    A relative ``root`` in the file is taken relative to the file itself;
    without one, the file's directory is the root.

    :raises FileNotFoundError: If the file does not exist.
    :raises pydantic.ValidationError: If the content is invalid.
    """
    path = expanded_path(path or CONFIG_FILENAME)
    data = load_file(path) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Configuration {path} must be a mapping, got {type(data).__name__}")

    root = data.get("root") or "."
    if not isinstance(root, (str, Path)):
        raise ValueError(f"Configuration {path}: root must be a path, got {type(root).__name__}")

    root = expanded_path(root)
    data["root"] = root if root.is_absolute() else path.parent.absolute() / root

    logger.debug("Loaded configuration from %s (root=%s)", path, data["root"])
    return PreloaderConfig(**data)
