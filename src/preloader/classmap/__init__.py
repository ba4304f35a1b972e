from .loaders import (
    CLASSMAP_FILENAME,
    load_class_map,
    locate_class_map,
    parse_composer_class_map,
)

__all__ = [
    "CLASSMAP_FILENAME",
    "load_class_map",
    "locate_class_map",
    "parse_composer_class_map",
]
