"""Processor modules for asset resolution."""

from .assets import AssetResolver

__all__ = ["AssetResolver"]
