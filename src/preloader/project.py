"""Project-level operations driven by ``preload.yaml``.

These tie the configuration to the builder and the loader; the CLI commands
are thin wrappers around them.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional

from .builder import ManifestBuilder
from .classmap import load_class_map
from .config.models import PreloaderConfig
from .loader.preloader import PreloadResult, Preloader
from .runtime import Runtime, create_runtime

logger = logging.getLogger(__name__)


def get_class_map(config: PreloaderConfig) -> Mapping[str, str]:
    return load_class_map(config.resolve(config.class_map))


def create_builder(
        config: PreloaderConfig,
        class_map: Optional[Mapping[str, str]] = None,
) -> ManifestBuilder:
    """
    Run every discovery step configured in ``config``.

    Exclusions are registered first so they apply to every later step.
    Scans run before the auxiliary file lists are filled.

    :param config: Project configuration.
    :param class_map: Use this map instead of loading ``config.class_map``.
    :return: A builder holding the discovered classes and files.
    """
    if class_map is None:
        class_map = get_class_map(config)

    builder = ManifestBuilder(class_map)

    for pattern in config.exclude:
        builder.exclude_pattern(pattern)
    for namespace in config.exclude_namespaces:
        builder.exclude_pattern(builder.patterns.starts_with_namespace(namespace))

    for pattern in config.preload:
        builder.register_by_pattern(pattern)
    for namespace in config.preload_namespaces:
        builder.register_by_pattern(builder.patterns.starts_with_namespace(namespace))

    type_sources = config.expand(config.scan.types)
    import_sources = config.expand(config.scan.imports)
    logger.info(
        "Scanning %d file(s) for type usages and %d file(s) for imports",
        len(type_sources),
        len(import_sources),
    )
    builder.scan_files_for_type_usages(type_sources)
    builder.scan_files_for_imports(import_sources)

    builder.register_files(config.expand(config.files))
    builder.register_compile_targets(config.expand(config.compile))

    logger.info("Discovered %d class(es)", len(builder.get_registered_types()))
    return builder


def build_manifest(
        config: PreloaderConfig,
        output: Optional[Path] = None,
        class_map: Optional[Mapping[str, str]] = None,
) -> tuple[ManifestBuilder, Path]:
    """Build the manifest and write it to ``output`` (default: ``config.manifest``)."""
    builder = create_builder(config, class_map)
    path = builder.write_manifest(config.resolve(output or config.manifest))
    return builder, path


def create_preloader(
        config: PreloaderConfig,
        runtime: Optional[Runtime] = None,
        class_map: Optional[Mapping[str, str]] = None,
        manifest: Optional[Path] = None,
) -> Preloader:
    if class_map is None:
        class_map = get_class_map(config)
    if runtime is None:
        runtime = create_runtime(config.loader)
    return Preloader(class_map, config.resolve(manifest or config.manifest), runtime)


def run_preload(
        config: PreloaderConfig,
        runtime: Optional[Runtime] = None,
        include_only: Optional[bool] = None,
        check_environment: Optional[bool] = None,
        class_map: Optional[Mapping[str, str]] = None,
) -> tuple[Preloader, PreloadResult]:
    """
    Check the environment and replay the manifest.

    ``include_only`` and ``check_environment`` default to the loader config.

    :raises PreloaderError: On any fatal condition, before loading where possible.
    """
    preloader = create_preloader(config, runtime=runtime, class_map=class_map)

    if check_environment is None:
        check_environment = config.loader.check_environment
    if include_only is None:
        include_only = config.loader.include_only

    if check_environment:
        preloader.check_environment()

    return preloader, preloader.preload(include_only=include_only)
