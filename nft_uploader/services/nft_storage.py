"""NFT.Storage backend."""

import json
import logging
from pathlib import Path

import requests

from ..config import NftStorageConfig
from ..errors import BackendUploadError
from ..models.upload import StorageType, UploadResult
from ..processors.assets import animation_reference
from ..utils.identifiers import with_extension_hint
from .base import UPLOAD_TIMEOUT, StorageBackend, read_media, response_json, set_media_links

logger = logging.getLogger(__name__)

API_URL = "https://api.nft.storage"


def nft_storage_link(cid: str) -> str:
    """Gateway URL for content stored on NFT.Storage."""
    return f"https://{cid}.ipfs.nftstorage.link"


class NftStorageClient:
    """Minimal client for the NFT.Storage blob API."""

    def __init__(self, api_key: str, api_url: str = API_URL) -> None:
        self._api_key = api_key
        self._api_url = api_url.rstrip("/")

    def store_blob(self, data: bytes) -> str:
        """Store raw bytes and return the resulting CID."""
        try:
            response = requests.post(
                f"{self._api_url}/upload",
                headers={"Authorization": f"Bearer {self._api_key}"},
                data=data,
                timeout=UPLOAD_TIMEOUT,
            )
        except requests.RequestException as e:
            raise BackendUploadError(f"NFT.Storage upload failed: {e}") from e

        body = response_json(response, "NFT.Storage")
        if not body.get("ok"):
            error = body.get("error", {})
            message = error.get("message") if isinstance(error, dict) else error
            raise BackendUploadError(f"NFT.Storage upload failed: {message}")

        cid = body.get("value", {}).get("cid")
        if not cid:
            raise BackendUploadError("NFT.Storage returned no CID")
        return cid


class NftStorageBackend(StorageBackend):
    """Stores media and manifests on NFT.Storage.

    The only backend that also implements media-only and metadata-only
    uploads.
    """

    storage_type = StorageType.NFT_STORAGE

    def __init__(self, config: NftStorageConfig) -> None:
        self._config = config
        self._client: NftStorageClient | None = None

    @property
    def client(self) -> NftStorageClient:
        """Lazy-initialize the API client."""
        if self._client is None:
            if not self._config.is_configured:
                raise BackendUploadError(
                    "NFT.Storage API key is required (--nft-storage-key)"
                )
            self._client = NftStorageClient(self._config.api_key)
        return self._client

    def upload(
        self,
        image: Path,
        animation: Path | None,
        manifest: bytes,
        index: str,
    ) -> UploadResult:
        image_link = with_extension_hint(self.upload_media(image), image)
        animation_link = (
            with_extension_hint(self.upload_media(animation), animation)
            if animation
            else None
        )
        return self.upload_metadata(set_media_links(manifest, image_link, animation_link))

    def upload_media(self, media: Path) -> str:
        link = nft_storage_link(self.client.store_blob(read_media(media)))
        logger.info(f"Uploaded media {media}: {link}")
        return link

    def upload_metadata(self, manifest: dict) -> UploadResult:
        cid = self.client.store_blob(json.dumps(manifest).encode("utf-8"))
        link = nft_storage_link(cid)
        logger.info(f"Uploaded manifest: {link}")
        return UploadResult(link, manifest.get("image"), animation_reference(manifest))
