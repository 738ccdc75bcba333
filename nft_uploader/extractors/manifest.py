"""Manifest JSON loading."""

import json
import logging
from pathlib import Path

from ..errors import ManifestNotFoundError, ManifestParseError, ManifestReadError
from ..utils.identifiers import is_valid_url

logger = logging.getLogger(__name__)

# Template placeholders replaced by the asset index, e.g. "image.png" -> "3.png"
PLACEHOLDER_FIELDS = ("image", "animation_url")


def load_manifest(directory: Path | str, filename: str) -> dict:
    """Read and parse a manifest JSON file.

    Args:
        directory: Directory holding the manifest
        filename: Manifest filename, already normalized to "<index>.json"

    Returns:
        The parsed manifest, with template placeholders substituted.

    Raises:
        ManifestNotFoundError: If the file does not exist
        ManifestReadError: If the file exists but cannot be read
        ManifestParseError: If the file is not a UTF-8 JSON object
    """
    manifest_path = Path(directory) / filename
    index = filename[: -len(".json")] if filename.endswith(".json") else filename

    try:
        with open(manifest_path, "rb") as f:
            content = f.read()
    except FileNotFoundError as e:
        raise ManifestNotFoundError(f"Manifest not found: {manifest_path}") from e
    except IsADirectoryError as e:
        raise ManifestNotFoundError(f"Manifest is a directory: {manifest_path}") from e
    except OSError as e:
        raise ManifestReadError(f"Could not read manifest {manifest_path}: {e}") from e

    try:
        manifest = json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestParseError(f"Invalid JSON in {manifest_path}: {e}") from e

    if not isinstance(manifest, dict):
        raise ManifestParseError(f"Manifest {manifest_path} is not a JSON object")

    logger.debug(f"Loaded manifest {manifest_path}")
    return _substitute_placeholders(manifest, index)


def encode_manifest(manifest: dict) -> bytes:
    """Serialize a manifest into the compact bytes sent to backends."""
    return json.dumps(manifest, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _substitute_placeholders(manifest: dict, index: str) -> dict:
    """Replace the first placeholder occurrence in bare media filenames.

    URLs are left untouched.
    """
    substituted = dict(manifest)
    for field in PLACEHOLDER_FIELDS:
        value = substituted.get(field)
        if isinstance(value, str) and not is_valid_url(value) and field in value:
            substituted[field] = value.replace(field, index, 1)
    return substituted
