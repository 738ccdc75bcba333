"""Utility modules for identifiers and filenames."""

from .identifiers import (
    guess_content_type,
    is_valid_url,
    manifest_filename,
    media_extension,
    sanitize_s3_key,
    with_extension_hint,
)

__all__ = [
    "guess_content_type",
    "is_valid_url",
    "manifest_filename",
    "media_extension",
    "sanitize_s3_key",
    "with_extension_hint",
]
