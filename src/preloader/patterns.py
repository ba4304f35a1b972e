"""Helpers that build class-name regular expressions."""

import re

NAMESPACE_SEPARATOR = "\\"


def strip_separator(name: str) -> str:
    """Drop one leading namespace separator from a fully-qualified name."""
    return name[1:] if name.startswith(NAMESPACE_SEPARATOR) else name


class PreloadPatterns:
    """Factory for patterns accepted by ``exclude_pattern`` and ``register_by_pattern``."""

    @staticmethod
    def starts_with_namespace(*namespace: str) -> str:
        """Match every class inside ``namespace``.

        Parts are joined with the namespace separator, so both
        ``starts_with_namespace("App", "Model")`` and
        ``starts_with_namespace("App\\\\Model")`` give the same pattern.
        """
        joined = NAMESPACE_SEPARATOR.join(part.strip(NAMESPACE_SEPARATOR) for part in namespace)
        return "^%s%s" % (re.escape(joined), re.escape(NAMESPACE_SEPARATOR))

    @staticmethod
    def exact(class_name: str) -> str:
        """Match a single fully-qualified class name."""
        return "^%s$" % re.escape(strip_separator(class_name))
