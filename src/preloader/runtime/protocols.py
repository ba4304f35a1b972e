from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class RuntimeEnvironment:
    """Capabilities reported by a runtime, checked before preloading.

    ``cache_name`` and ``compile_primitive`` name the cache and the compile
    function in diagnostics, e.g. ``Opcache`` and ``opcache_compile_file``.
    """
    cache_name: str
    compile_primitive: str
    cache_enabled: bool
    compile_available: bool
    cli: bool
    cli_cache_enabled: bool


@runtime_checkable
class Runtime(Protocol):
    """
    Protocol for the runtime that preloaded files are handed to.

    ensure_loaded: Load a file once. ``required`` files must exist
        (require semantics); others may be missing (include semantics).
    compile_file: Populate the cache for a file without executing it.
    environment: Report the capabilities checked by the loader.
    """

    def ensure_loaded(self, path: str, required: bool = True) -> None:
        ...

    def compile_file(self, path: str) -> None:
        ...

    def environment(self) -> RuntimeEnvironment:
        ...


def environment_messages(cache_name: str, compile_primitive: str) -> tuple[str, str, str]:
    """Diagnostics for a disabled cache, a missing compile primitive and a disabled CLI cache."""
    return (
        f"{cache_name} is not available.",
        f"{cache_name} function {compile_primitive} is not available.",
        f"{cache_name} is not enabled for CLI applications.",
    )
