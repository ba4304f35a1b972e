"""In-process Python runtime: imports files and writes their bytecode cache."""

import hashlib
import importlib.util
import logging
import py_compile
import sys
from pathlib import Path
from types import ModuleType

from .protocols import RuntimeEnvironment

logger = logging.getLogger(__name__)

BYTECODE_CACHE = "Bytecode cache"
PY_COMPILE = "py_compile.compile"


def _module_name(path: Path) -> str:
    digest = hashlib.sha1(path.as_posix().encode("utf-8")).hexdigest()[:8]
    return f"_preloaded_{path.stem}_{digest}"


def _load_module(path: Path) -> ModuleType:
    """
    Execute a Python file as a module.

    :param path: Absolute path to the file.
    :return: The loaded module.
    """
    module_name = _module_name(path)

    if module_name in sys.modules:
        logger.debug("Module already loaded, reusing: %s", module_name)
        return sys.modules[module_name]

    logger.debug("Creating module spec for: %s", module_name)
    spec = importlib.util.spec_from_file_location(module_name, path.as_posix())

    assert spec is not None
    loader = spec.loader
    assert loader is not None

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module

    logger.debug("Executing module: %s", module_name)
    try:
        loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise

    return module


class ImportlibRuntime:
    """Preloads Python files into the current interpreter."""

    def __init__(self):
        self.loaded: dict[str, ModuleType] = {}
        self.compiled: list[str] = []

    def ensure_loaded(self, path: str, required: bool = True) -> None:
        resolved = Path(path).resolve()
        key = resolved.as_posix()

        if key in self.loaded:
            return

        if not resolved.is_file():
            if required:
                logger.error("Module not found: %s", resolved)
                raise FileNotFoundError(f"Module not found: {resolved}")
            logger.warning("Skipping missing file: %s", resolved)
            return

        self.loaded[key] = _load_module(resolved)

    def compile_file(self, path: str) -> None:
        cfile = py_compile.compile(path, doraise=True)
        logger.debug("Compiled %s -> %s", path, cfile)
        self.compiled.append(path)

    def environment(self) -> RuntimeEnvironment:
        cache_enabled = not sys.dont_write_bytecode
        return RuntimeEnvironment(
            cache_name=BYTECODE_CACHE,
            compile_primitive=PY_COMPILE,
            cache_enabled=cache_enabled,
            compile_available=sys.implementation.cache_tag is not None,
            cli=True,
            cli_cache_enabled=cache_enabled,
        )
