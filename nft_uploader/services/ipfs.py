"""IPFS HTTP API backend (Infura-style endpoint with basic auth)."""

import json
import logging
import time
from pathlib import Path

import requests

from ..config import IpfsConfig
from ..errors import BackendUploadError
from ..models.upload import StorageType, UploadResult
from ..utils.identifiers import with_extension_hint
from .base import UPLOAD_TIMEOUT, StorageBackend, read_media, response_json, set_media_links

logger = logging.getLogger(__name__)

PUBLIC_GATEWAY = "https://ipfs.io/ipfs"

# Pause after the manifest is pinned
PIN_SETTLE_DELAY = 0.5


class IpfsBackend(StorageBackend):
    """Adds and pins content through an IPFS HTTP API."""

    storage_type = StorageType.IPFS

    def __init__(self, config: IpfsConfig) -> None:
        self._config = config

    def upload(
        self,
        image: Path,
        animation: Path | None,
        manifest: bytes,
        index: str,
    ) -> UploadResult:
        auth = self._config.auth()
        if auth is None:
            raise BackendUploadError(
                "IPFS credentials are required (--ipfs-credentials projectId:secretKey)"
            )

        image_link = with_extension_hint(self._upload_media(image, auth), image)
        animation_link = (
            with_extension_hint(self._upload_media(animation, auth), animation)
            if animation
            else None
        )

        manifest_json = set_media_links(manifest, image_link, animation_link)
        manifest_hash = self._add(
            "metadata.json", json.dumps(manifest_json).encode("utf-8"), auth
        )
        self._pin(manifest_hash, auth)
        time.sleep(PIN_SETTLE_DELAY)

        link = f"{PUBLIC_GATEWAY}/{manifest_hash}"
        logger.info(f"uploaded manifest: {link}")
        return UploadResult(link, image_link, animation_link)

    def _upload_media(self, media: Path, auth: tuple[str, str]) -> str:
        """Add and pin a media file, returning its gateway URL."""
        media_hash = self._add(Path(media).name, read_media(media), auth)
        logger.debug(f"mediaHash: {media_hash}")
        self._pin(media_hash, auth)

        media_url = f"{PUBLIC_GATEWAY}/{media_hash}"
        logger.info(f"uploaded media for file {media}: {media_url}")
        return media_url

    def _add(self, filename: str, data: bytes, auth: tuple[str, str]) -> str:
        """Add content to IPFS and return its CID."""
        result = self._post("add", auth, files={"file": (filename, data)})
        cid = result.get("Hash")
        if not cid:
            raise BackendUploadError(f"IPFS returned no hash for {filename}")
        return cid

    def _pin(self, cid: str, auth: tuple[str, str]) -> None:
        self._post("pin/add", auth, params={"arg": cid})

    def _post(self, command: str, auth: tuple[str, str], **kwargs) -> dict:
        url = f"{self._config.api_url.rstrip('/')}/api/v0/{command}"
        try:
            response = requests.post(url, auth=auth, timeout=UPLOAD_TIMEOUT, **kwargs)
        except requests.RequestException as e:
            raise BackendUploadError(f"IPFS {command} failed: {e}") from e
        return response_json(response, "IPFS")
