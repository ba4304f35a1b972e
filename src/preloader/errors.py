"""Exception types raised by the preloader library.

Library code never terminates the process; the CLI turns these into a
one-line diagnostic and exit status 1.
"""

from pathlib import Path
from typing import Union


class PreloaderError(RuntimeError):
    """Base class for all fatal preloader conditions."""


class ManifestFormatError(PreloaderError):
    """The manifest is not JSON or does not have the expected shape."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__(f"Json {self.path} is not in expected format.")


class UnknownClassError(PreloaderError):
    """A class listed in the manifest is missing from the class map."""

    def __init__(self, class_name: str):
        self.class_name = class_name
        super().__init__(f"Class {class_name} is not known to the class map.")


class EnvironmentCheckError(PreloaderError):
    """The hosting runtime lacks a capability required for preloading."""


class ClassMapError(PreloaderError):
    """The class map source is missing or malformed."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Class map {self.path}: {reason}")
