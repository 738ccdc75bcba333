"""Storage backends and their registry."""

from .arweave import ArweaveBackend
from .aws import AwsBackend
from .base import StorageBackend
from .ipfs import IpfsBackend
from .nft_storage import NftStorageBackend
from .pinata import PinataBackend
from .registry import BackendRegistry

__all__ = [
    "ArweaveBackend",
    "AwsBackend",
    "BackendRegistry",
    "IpfsBackend",
    "NftStorageBackend",
    "PinataBackend",
    "StorageBackend",
]
