"""Extractor modules for manifest metadata."""

from .manifest import encode_manifest, load_manifest

__all__ = ["encode_manifest", "load_manifest"]
