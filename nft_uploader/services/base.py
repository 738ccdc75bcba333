"""Common storage backend contract."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import requests

from ..errors import BackendUploadError, UnsupportedBackendError
from ..models.upload import StorageType, UploadResult

logger = logging.getLogger(__name__)

# Timeout for HTTP uploads (connect, read) in seconds
UPLOAD_TIMEOUT = (30, 300)


class StorageBackend:
    """Base class for storage backends.

    Every backend implements upload(); the narrower operations used by the
    media-only and metadata-only commands are optional.
    """

    storage_type: StorageType

    def upload(
        self,
        image: Path,
        animation: Path | None,
        manifest: bytes,
        index: str,
    ) -> UploadResult:
        """Upload media plus manifest and return the resulting links."""
        raise NotImplementedError

    def upload_media(self, media: Path) -> str:
        """Upload a single media file and return its link."""
        raise UnsupportedBackendError(
            f"Not implemented: {self.storage_type.value} cannot upload media only"
        )

    def upload_metadata(self, manifest: dict) -> UploadResult:
        """Upload a manifest that already references hosted media."""
        raise UnsupportedBackendError(
            f"Not implemented: {self.storage_type.value} cannot upload metadata only"
        )


def set_media_links(
    manifest: bytes, image_link: str, animation_link: str | None = None
) -> dict:
    """Point a manifest at uploaded media.

    Returns a new manifest in which "image" (and "animation_url" when an
    animation was uploaded) hold the new links, along with any
    properties.files entry whose uri matched the original value.
    """
    manifest_json = json.loads(manifest.decode("utf-8"))
    properties = manifest_json.get("properties")
    files = properties.get("files") if isinstance(properties, dict) else None
    if not isinstance(files, list):
        files = []

    _replace_link(manifest_json, files, "image", image_link)
    if animation_link:
        _replace_link(manifest_json, files, "animation_url", animation_link)

    return manifest_json


def _replace_link(manifest_json: dict, files: list, field: str, link: str) -> None:
    original = manifest_json.get(field)
    manifest_json[field] = link
    for file in files:
        if isinstance(file, dict) and original is not None and file.get("uri") == original:
            file["uri"] = link


def read_media(media: Path) -> bytes:
    """Read a media file, reporting failures as upload errors."""
    try:
        return Path(media).read_bytes()
    except OSError as e:
        raise BackendUploadError(f"Could not read {media}: {e}") from e


def response_json(response: requests.Response, service: str) -> dict:
    """Check an HTTP response and decode its JSON body."""
    try:
        response.raise_for_status()
        data = response.json()
    except requests.HTTPError as e:
        raise BackendUploadError(f"{service} request failed: {e}") from e
    except ValueError as e:
        raise BackendUploadError(f"{service} returned invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise BackendUploadError(f"{service} returned an unexpected response")
    return data
