"""Pinata pinning service backend."""

import json
import logging
import time
from pathlib import Path

import requests

from ..config import PinataConfig
from ..errors import BackendUploadError
from ..models.upload import StorageType, UploadResult
from .base import UPLOAD_TIMEOUT, StorageBackend, read_media, response_json

logger = logging.getLogger(__name__)

PIN_FILE_URL = "https://api.pinata.cloud/pinning/pinFileToIPFS"

# Pause between consecutive pins
PIN_INTERVAL = 0.5


class PinataBackend(StorageBackend):
    """Pins media and manifests to IPFS through Pinata."""

    storage_type = StorageType.PINATA

    def __init__(self, config: PinataConfig) -> None:
        self._config = config

    def upload(
        self,
        image: Path,
        animation: Path | None,
        manifest: bytes,
        index: str,
    ) -> UploadResult:
        if not self._config.jwt:
            raise BackendUploadError("Pinata JWT is required (--pinata-jwt)")

        gateway = self._config.gateway_url

        image_cid = self._pin(Path(image).name, read_media(image))
        image_link = f"{gateway}/ipfs/{image_cid}"
        logger.info(f"uploaded image: {image_link}")
        time.sleep(PIN_INTERVAL)

        animation_link = None
        if animation:
            animation_cid = self._pin(Path(animation).name, read_media(animation))
            animation_link = f"{gateway}/ipfs/{animation_cid}"
            logger.info(f"uploaded animation: {animation_link}")
            time.sleep(PIN_INTERVAL)

        manifest_json = json.loads(manifest.decode("utf-8"))
        manifest_json["image"] = image_link
        if animation_link:
            manifest_json["animation_url"] = animation_link

        metadata_cid = self._pin(
            "metadata.json", json.dumps(manifest_json).encode("utf-8")
        )
        time.sleep(PIN_INTERVAL)
        link = f"{gateway}/ipfs/{metadata_cid}"
        logger.info(f"uploaded manifest: {link}")

        return UploadResult(link, image_link, animation_link)

    def _pin(self, filename: str, data: bytes) -> str:
        """Pin a file and return its CID."""
        try:
            response = requests.post(
                PIN_FILE_URL,
                headers={"Authorization": f"Bearer {self._config.jwt}"},
                files={"file": (filename, data)},
                timeout=UPLOAD_TIMEOUT,
            )
        except requests.RequestException as e:
            raise BackendUploadError(f"Pinata upload of {filename} failed: {e}") from e

        cid = response_json(response, "Pinata").get("IpfsHash")
        if not cid:
            raise BackendUploadError(f"Pinata returned no IpfsHash for {filename}")
        return cid
