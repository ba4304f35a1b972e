from .manifest import (
    MANIFEST_FILENAME,
    PreloadManifest,
    load_manifest,
    parse_manifest,
    write_manifest,
)
from .preloader import PreloadResult, Preloader, check_environment

__all__ = [
    "MANIFEST_FILENAME",
    "PreloadManifest",
    "load_manifest",
    "parse_manifest",
    "write_manifest",
    "PreloadResult",
    "Preloader",
    "check_environment",
]
