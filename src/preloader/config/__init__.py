from .base import Settings
from .loaders import load_file
from .models import (
    CONFIG_FILENAME,
    LoaderConfig,
    PreloaderConfig,
    ScanConfig,
    load_config,
)

__all__ = [
    "Settings",
    "load_file",
    "CONFIG_FILENAME",
    "LoaderConfig",
    "PreloaderConfig",
    "ScanConfig",
    "load_config",
]
