"""Data models for assets and upload results."""

from .upload import Asset, ResolvedAssets, StorageType, UploadResult

__all__ = [
    "Asset",
    "ResolvedAssets",
    "StorageType",
    "UploadResult",
]
