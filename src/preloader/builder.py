"""Manifest builder: discovers the classes an application should preload.

Discovery is a heuristic over source text. Over-inclusion only preloads an
unused class; a miss only costs a cache warm-up at runtime.
"""

import logging
import os
import re
from pathlib import Path
from typing import Iterable, Mapping, Union

from .loader.manifest import PreloadManifest, write_manifest
from .patterns import PreloadPatterns, strip_separator
from .utils import OrderedSet

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

_TYPE = r"[a-zA-Z0-9\\_]+"

TYPE_USAGE_PATTERNS: tuple[re.Pattern, ...] = (
    # function return types
    re.compile(r"public function \w+\([^)]*\): (%s)" % _TYPE),
    # new ...
    re.compile(r"new (%s)" % _TYPE),
    # implements ...
    re.compile(r"implements (%s)" % _TYPE),
)

IMPORT_PATTERN = re.compile(
    r"^use (%s)(?:\s+as\s+%s)?;" % (_TYPE, _TYPE),
    re.MULTILINE,
)


def _read_source(path: PathLike) -> str:
    # legacy sources may not be UTF-8; the patterns only capture ASCII
    return Path(path).read_text(encoding="utf-8", errors="replace")


class ManifestBuilder:
    """Accumulates classes and files to preload and writes the manifest.

    :param class_map: Mapping of fully-qualified class name to file path.
        Only names present here can be registered.
    """

    def __init__(self, class_map: Mapping[str, str]):
        self.patterns = PreloadPatterns()
        self._class_map = class_map
        self._excluded: dict[str, re.Pattern] = {}
        self._classes: OrderedSet[str] = OrderedSet()
        self._files: OrderedSet[str] = OrderedSet()
        self._compile: OrderedSet[str] = OrderedSet()

    # -- auxiliary file lists -------------------------------------------------

    def register_file(self, path: PathLike) -> None:
        """Include ``path`` verbatim at preload time."""
        self._files.add(os.fspath(path))

    def register_files(self, paths: Iterable[PathLike]) -> "ManifestBuilder":
        for path in paths:
            self.register_file(path)
        return self

    def register_compile_target(self, path: PathLike) -> None:
        """Compile ``path`` without executing it at preload time."""
        self._compile.add(os.fspath(path))

    def register_compile_targets(self, paths: Iterable[PathLike]) -> "ManifestBuilder":
        for path in paths:
            self.register_compile_target(path)
        return self

    # -- scanning -------------------------------------------------------------

    def scan_file_for_type_usages(self, path: PathLike) -> "ManifestBuilder":
        """Register return types, instantiations and implemented interfaces in ``path``.

        :raises OSError: If the file cannot be read.
        """
        contents = _read_source(path)
        found = 0
        for pattern in TYPE_USAGE_PATTERNS:
            for match in pattern.finditer(contents):
                found += self.register_type(match.group(1))
        logger.debug("Scanned %s for type usages: %d new class(es)", path, found)
        return self

    def scan_files_for_type_usages(self, paths: Iterable[PathLike]) -> "ManifestBuilder":
        for path in paths:
            self.scan_file_for_type_usages(path)
        return self

    def scan_file_for_imports(self, path: PathLike) -> "ManifestBuilder":
        """Register every ``use`` statement found at the start of a line in ``path``.

        :raises OSError: If the file cannot be read.
        """
        found = 0
        for match in IMPORT_PATTERN.finditer(_read_source(path)):
            found += self.register_type(match.group(1))
        logger.debug("Scanned %s for imports: %d new class(es)", path, found)
        return self

    def scan_files_for_imports(self, paths: Iterable[PathLike]) -> "ManifestBuilder":
        for path in paths:
            self.scan_file_for_imports(path)
        return self

    # -- registration ---------------------------------------------------------

    def register_type(self, name: str) -> bool:
        """Register a class name if it is not excluded and the class map knows it.

        :return: True if the name was newly registered.
        """
        name = strip_separator(name)

        if name in self._classes:
            return False

        for text, pattern in self._excluded.items():
            if pattern.search(name):
                logger.debug("Class %s excluded by %s", name, text)
                return False

        if name not in self._class_map:
            logger.debug("Class %s is not in the class map, skipping", name)
            return False

        self._classes.add(name)
        return True

    def exclude_pattern(self, pattern: str) -> None:
        """Never register names matching ``pattern`` from now on.

        :raises re.error: If ``pattern`` is not a valid regular expression.
        """
        if pattern not in self._excluded:
            self._excluded[pattern] = re.compile(pattern)

    def register_by_pattern(self, pattern: str) -> int:
        """Register every class map entry whose name matches ``pattern``.

        :return: Number of newly registered classes.
        """
        compiled = re.compile(pattern)
        found = 0
        for name in self._class_map:
            if compiled.search(name):
                found += self.register_type(name)
        logger.debug("Pattern %s registered %d class(es)", pattern, found)
        return found

    def get_registered_types(self) -> list[str]:
        return self._classes.to_list()

    def get_excluded_patterns(self) -> list[str]:
        return list(self._excluded)

    # -- output ---------------------------------------------------------------

    def to_manifest(self) -> PreloadManifest:
        return PreloadManifest(
            classes=self._classes.to_list(),
            files=self._files.to_list(),
            compile=self._compile.to_list(),
        )

    def write_manifest(self, path: PathLike) -> Path:
        """Write the manifest to ``path``, overwriting it."""
        return write_manifest(self.to_manifest(), path)
