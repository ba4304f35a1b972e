"""
preloader - opcode cache preload manifests for PHP applications.

Build time: ``ManifestBuilder`` scans sources for the classes an application
uses and writes a JSON manifest. Process start: ``Preloader`` replays the
manifest through a runtime, loading every class and file it lists.
"""

from .builder import ManifestBuilder
from .classmap import load_class_map
from .config import LoaderConfig, PreloaderConfig, ScanConfig, load_config
from .errors import (
    ClassMapError,
    EnvironmentCheckError,
    ManifestFormatError,
    PreloaderError,
    UnknownClassError,
)
from .loader import (
    PreloadManifest,
    PreloadResult,
    Preloader,
    check_environment,
    load_manifest,
)
from .patterns import PreloadPatterns
from .project import build_manifest, create_builder, run_preload
from .runtime import (
    ImportlibRuntime,
    PhpProbe,
    PhpScriptRuntime,
    Runtime,
    RuntimeEnvironment,
    create_runtime,
)
from .utils import OrderedSet

__all__ = [
    # Builder
    "ManifestBuilder",
    "PreloadPatterns",
    # Loader
    "Preloader",
    "PreloadResult",
    "PreloadManifest",
    "check_environment",
    "load_manifest",
    # Class map
    "load_class_map",
    # Runtimes
    "Runtime",
    "RuntimeEnvironment",
    "PhpProbe",
    "PhpScriptRuntime",
    "ImportlibRuntime",
    "create_runtime",
    # Config
    "PreloaderConfig",
    "LoaderConfig",
    "ScanConfig",
    "load_config",
    # Project
    "build_manifest",
    "create_builder",
    "run_preload",
    # Errors
    "PreloaderError",
    "ManifestFormatError",
    "UnknownClassError",
    "EnvironmentCheckError",
    "ClassMapError",
    # Utils
    "OrderedSet",
]
