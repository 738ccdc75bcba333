"""Identifier utilities: URLs, filenames and object keys."""

import mimetypes
import re
from pathlib import Path
from urllib.parse import urlsplit

# RFC 3986 scheme: a letter followed by letters, digits, "+", "-" or "."
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")

# Schemes that are meaningless without a host
_HOST_SCHEMES = {"http", "https", "ftp", "ws", "wss"}

# Whitespace, controls and the code points a URL host may never contain
_FORBIDDEN_HOST_RE = re.compile(r"[\x00-\x20\x7f#%/<>?@\[\\\]^|]")


def is_valid_url(value: object) -> bool:
    """Check that a value is a well-formed absolute URL.

    A bare filename such as "0.png" is not a URL. Content-addressed schemes
    (e.g. "ipfs://<cid>", "ar://<id>") are accepted.
    """
    if not isinstance(value, str) or not value.strip():
        return False

    try:
        parts = urlsplit(value.strip())
        # Accessing port validates it and raises ValueError when malformed
        parts.port
    except ValueError:
        return False

    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        return False

    # A single letter scheme is a Windows drive, not a URL
    if len(parts.scheme) == 1:
        return False

    if parts.hostname and _FORBIDDEN_HOST_RE.search(parts.hostname):
        return False

    if parts.scheme.lower() in _HOST_SCHEMES:
        return bool(parts.hostname)

    return bool(parts.netloc or parts.path)


def manifest_filename(index: str) -> str:
    """Normalize an asset index into its manifest filename.

    Example: "0" -> "0.json", "0.json" -> "0.json"
    """
    return index if "json" in index else f"{index}.json"


def media_extension(media: Path | str) -> str:
    """Return the file extension of a media path without the leading dot."""
    return Path(str(media)).suffix.lstrip(".")


def with_extension_hint(url: str, media: Path | str) -> str:
    """Append the "?ext=" hint wallets use to infer the media type."""
    return f"{url}?ext={media_extension(media)}"


def guess_content_type(media: Path | str, fallback: str = "application/octet-stream") -> str:
    """Guess a MIME type from the media filename."""
    content_type, _ = mimetypes.guess_type(str(media))
    return content_type or fallback


def sanitize_s3_key(name: str, fallback: str = "asset") -> str:
    """Sanitize a filename for use as an S3 key component.

    Args:
        name: The filename to sanitize
        fallback: Value to use if name is empty after sanitization

    Returns:
        A sanitized string safe for use in S3 keys (only A-Z, a-z, 0-9,
        dots and dashes)
    """
    if not name:
        return fallback

    # Replace spaces and underscores with dashes
    sanitized = re.sub(r"[\s_]+", "-", name)

    # Remove all characters except alphanumeric, dots and dashes
    sanitized = re.sub(r"[^A-Za-z0-9.-]", "", sanitized)

    # Collapse multiple dashes into single dash
    sanitized = re.sub(r"-+", "-", sanitized)

    # Trim leading/trailing dashes and dots
    sanitized = sanitized.strip("-.")

    # Handle empty result
    if not sanitized:
        return fallback

    return sanitized
