"""Preload manifest handling.

The manifest is the only artifact handed from build time to run time. It is
a JSON object with three required arrays:

    {"classes": [...], "files": [...], "compile": [...]}
"""

import json
import logging
from pathlib import Path
from typing import Union

import pydantic

from ..errors import ManifestFormatError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "preload.json"
MANIFEST_INDENT = 4


class PreloadManifest(pydantic.BaseModel):
    """Schema for the preload manifest.

    ``classes`` holds fully-qualified class names, resolved through the class
    map at load time. ``files`` are included as-is and ``compile`` entries are
    compiled without being executed.
    """

    classes: list[str]
    files: list[str]
    compile: list[str]

    model_config = pydantic.ConfigDict(strict=True, extra="ignore")

    def to_json(self) -> str:
        """Serialize as pretty-printed JSON."""
        return json.dumps(
            self.model_dump(),
            indent=MANIFEST_INDENT,
            ensure_ascii=False,
        )


def parse_manifest(content: str, path: Union[str, Path]) -> PreloadManifest:
    """Validate raw manifest text.

    Args:
        content: JSON text of the manifest.
        path: Manifest location, used in the error message.

    Raises:
        ManifestFormatError: If the content is not JSON or has the wrong shape.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.debug("Manifest %s is not valid JSON: %s", path, e)
        raise ManifestFormatError(path) from e

    if not isinstance(data, dict):
        logger.debug("Manifest %s is a %s, not an object", path, type(data).__name__)
        raise ManifestFormatError(path)

    try:
        return PreloadManifest.model_validate(data)
    except pydantic.ValidationError as e:
        logger.debug("Manifest %s failed validation: %s", path, e)
        raise ManifestFormatError(path) from e


def load_manifest(path: Union[str, Path]) -> PreloadManifest:
    """Read and validate a manifest file.

    Raises:
        OSError: If the file cannot be read.
        ManifestFormatError: If the content is malformed.
    """
    path = Path(path)
    logger.debug("Loading manifest from: %s", path)

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        logger.debug("Manifest %s is not UTF-8: %s", path, e)
        raise ManifestFormatError(path) from e

    manifest = parse_manifest(content, path)

    logger.debug(
        "Loaded manifest with %d class(es), %d file(s), %d compile target(s)",
        len(manifest.classes),
        len(manifest.files),
        len(manifest.compile),
    )
    return manifest


def write_manifest(manifest: PreloadManifest, path: Union[str, Path]) -> Path:
    """Write ``manifest`` to ``path``, replacing any existing content."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(manifest.to_json() + "\n", encoding="utf-8")
    logger.info("Wrote manifest: %s", path)
    return path
