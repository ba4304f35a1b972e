"""Replays a preload manifest through a runtime at process start."""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Union

from .manifest import PreloadManifest, load_manifest
from ..errors import EnvironmentCheckError, UnknownClassError
from ..runtime.protocols import Runtime, environment_messages

logger = logging.getLogger(__name__)


def check_environment(runtime: Runtime) -> None:
    """
    Verify the runtime can preload.

    :raises EnvironmentCheckError: On the first failing precondition.
    """
    env = runtime.environment()
    not_available, no_compile, no_cli = environment_messages(env.cache_name, env.compile_primitive)

    if not env.cache_enabled:
        raise EnvironmentCheckError(not_available)

    if not env.compile_available:
        raise EnvironmentCheckError(no_compile)

    if env.cli and not env.cli_cache_enabled:
        raise EnvironmentCheckError(no_cli)

    logger.debug("Environment check passed: %s", env)


@dataclass(frozen=True)
class PreloadResult:
    """Outcome of one ``Preloader.preload`` call."""
    elapsed: float
    classes: int
    files: int
    compiles: int

    def as_dict(self) -> dict:
        return {
            "time": self.elapsed,
            "classes": self.classes,
            "files": self.files,
            "compiles": self.compiles,
        }


class Preloader:
    """
    Loads the classes and files listed in a manifest.

    The manifest is read and validated on construction, so a malformed
    manifest fails before anything is loaded.

    :param class_map: Mapping of class name to file, as at run time.
    :param manifest_path: Manifest written by ``ManifestBuilder``.
    :param runtime: Receives the load and compile calls.
    :raises ManifestFormatError: If the manifest is malformed.
    :raises OSError: If the manifest cannot be read.
    """

    def __init__(
            self,
            class_map: Mapping[str, str],
            manifest_path: Union[str, Path],
            runtime: Runtime,
    ):
        self.class_map = class_map
        self.manifest_path = Path(manifest_path)
        self.runtime = runtime
        self.manifest: PreloadManifest = load_manifest(self.manifest_path)

    def resolve_classes(self) -> list[str]:
        """
        Map every manifest class to its file.

        :raises UnknownClassError: On the first class missing from the class map.
        """
        resolved = []
        for class_name in self.manifest.classes:
            file = self.class_map.get(class_name)
            if file is None:
                logger.error("Class %s from %s is not in the class map", class_name, self.manifest_path)
                raise UnknownClassError(class_name)
            resolved.append(file)
        return resolved

    def preload(self, include_only: bool = False) -> PreloadResult:
        """
        Load manifest classes and files, then compile the compile targets.

        :param include_only: Skip the compile targets.
        :raises UnknownClassError: If a class is missing from the class map;
            nothing is loaded in that case.
        """
        timer = time.perf_counter()

        class_files = self.resolve_classes()

        for file in class_files:
            self.runtime.ensure_loaded(file, required=True)

        for file in self.manifest.files:
            self.runtime.ensure_loaded(file, required=False)

        compiles = 0
        if not include_only:
            for file in self.manifest.compile:
                self.runtime.compile_file(file)
            compiles = len(self.manifest.compile)
        else:
            logger.debug("Skipping %d compile target(s)", len(self.manifest.compile))

        result = PreloadResult(
            elapsed=time.perf_counter() - timer,
            classes=len(class_files),
            files=len(self.manifest.files),
            compiles=compiles,
        )
        logger.info(
            "Preloaded %d class(es), %d file(s), %d compile(s) in %.4fs",
            result.classes, result.files, result.compiles, result.elapsed,
        )
        return result

    def check_environment(self) -> None:
        """
        Verify the runtime can preload; call before ``preload``.

        :raises EnvironmentCheckError: On the first failing precondition.
        """
        check_environment(self.runtime)
